#!/usr/bin/env python3

import os
import pytest


def make_tree(root, files):
    """Create files (with their parent directories) under root."""
    for rel in files:
        path = os.path.join(str(root), rel)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w') as f:
            f.write(rel)
    return str(root)


@pytest.fixture
def test_directory(tmp_path):
    """Directory tree with nested, hidden and mixed-extension files."""
    return make_tree(tmp_path / 'root', [
        'a.txt',
        'b.md',
        'c.log',
        'sub/d.txt',
        'sub/deeper/e.txt',
        '.git/x.txt',
    ])


@pytest.fixture
def flat_directory(tmp_path):
    """Directory holding only top-level files."""
    return make_tree(tmp_path / 'flat', ['a.txt', 'b.md', 'c.log'])


@pytest.fixture
def tree_factory(tmp_path):
    """Build an arbitrary tree under a fresh directory."""
    def _factory(files, name='tree'):
        return make_tree(tmp_path / name, files)
    return _factory
