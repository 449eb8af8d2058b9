#!/usr/bin/env python3
"""
Quick Start Guide for markup-tree.

Walks through the pipeline on the sample document: token listing, tree dump,
then the diagnostics reported for a malformed input.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from markup_tree import build_tree, parse_string, render_tree, tokenize
from markup_tree.api import SAMPLE_MARKUP
from markup_tree.tree import render_tokens


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - markup-tree")
    print("=" * 45)

    # Step 1: Tokenize
    print("\nStep 1: Tokens")
    print("-" * 30)
    tokens = tokenize(SAMPLE_MARKUP)
    print(render_tokens(tokens))

    # Step 2: Build the tree
    print("\nStep 2: Tree")
    print("-" * 30)
    print(render_tree(build_tree(tokens)))

    # Step 3: Diagnostics for malformed markup
    print("\nStep 3: Diagnostics")
    print("-" * 30)
    result = parse_string("<b>bold</i></p> tail<div")
    print(render_tree(result.root))
    for diagnostic in result.diagnostics:
        print(f"  - {diagnostic.severity.name}: {diagnostic.message}")
    print(f"Open elements at end: {result.open_elements}")


if __name__ == "__main__":
    quick_start_example()
