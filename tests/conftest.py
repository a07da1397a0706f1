"""
Pytest configuration and shared fixtures for Room 302 tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import textwrap

import numpy as np
import pytest

SAMPLE_QUOTES_YAML = textwrap.dedent("""\
    quotes:
      - category: craft
        items:
          - title: Momentum
            text: Ship it messy, patch it live, glow up forever.
          - title: Night Shift
            text: Every bug is a tiny comet.
      - category: calm
        items:
          - title: Drift
            text: Breathe. Render. Repeat!
""")

TALL_TEMPLATE = textwrap.dedent("""\
    <svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 108 192" width="108" height="192">
      <rect width="108" height="192" fill="#2a3944"/>
      <text x="12" y="40"><tspan x="12" y="40">Lorem ipsum</tspan></text>
      <text x="12" y="80">
        <tspan x="12" y="80">Lorem ipsum dolor</tspan>
        <tspan x="12" y="87">sit amet consectetur</tspan>
        <tspan x="12" y="94">adipiscing elit sed</tspan>
        <tspan x="12" y="101">do eiusmod tempor</tspan>
        <tspan x="12" y="108">incididunt ut labore</tspan>
      </text>
      <text x="12" y="180">room 302</text>
    </svg>
""")

SQUARE_TEMPLATE = TALL_TEMPLATE.replace('viewBox="0 0 108 192"', 'viewBox="0 0 108 108"')


@pytest.fixture
def sample_quotes_file(tmp_path):
    """
    Write a small quote corpus to a temporary YAML file.

    Returns:
        Path to the corpus file
    """
    path = tmp_path / "quotes.yaml"
    path.write_text(SAMPLE_QUOTES_YAML, encoding="utf-8")
    return path


@pytest.fixture
def template_files(tmp_path):
    """
    Write one tall and one square template.

    Returns:
        List of two template paths
    """
    tall = tmp_path / "social-01.svg"
    square = tmp_path / "social-05.svg"
    tall.write_text(TALL_TEMPLATE, encoding="utf-8")
    square.write_text(SQUARE_TEMPLATE, encoding="utf-8")
    return [tall, square]


@pytest.fixture
def gradient_frame():
    """
    Provide a 32x24 RGBA frame with horizontal and vertical gradients.

    Returns:
        uint8 array of shape (24, 32, 4)
    """
    height, width = 24, 32
    ys, xs = np.mgrid[0:height, 0:width]
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[..., 0] = (xs * 8) % 256
    frame[..., 1] = (ys * 10) % 256
    frame[..., 2] = ((xs + ys) * 5) % 256
    frame[..., 3] = 200
    return frame
