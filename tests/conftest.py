"""Shared fixtures for barrelroll tests."""

from __future__ import annotations

from pathlib import Path

import pytest


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def ts_project(tmp_path: Path) -> Path:
    """A small TypeScript source tree with a nested module directory."""
    return write_files(
        tmp_path / "src",
        {
            "alpha.ts": "export const Alpha = 1;\n",
            "beta.ts": "export interface Bravo {}\nexport default class Beta {}\n",
            "gamma.tsx": "export function Gamma() {}\nexport type GammaProps = {};\n",
            "types.d.ts": "export interface Ambient {}\n",
            "internal.ts": "const hidden = 1;\n",
            "README.md": "export const notCode = 1;\n",
            "nested/delta.ts": "export class Delta {}\n",
            "node_modules/pkg/index.ts": "export const Vendor = 1;\n",
            ".cache/echo.ts": "export const Echo = 1;\n",
        },
    )
