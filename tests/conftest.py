"""
Test fixtures for liftmark-parser.

Provides a FastAPI TestClient, a deterministic id generator and sample
LMWF documents.
"""

import sys
from itertools import count
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import liftmark_parser...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from liftmark_parser.main import app


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient."""
    return TestClient(app)


# ---------------------------------------------------------------------------
# Parser Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Id generator yielding "id-1", "id-2", ... in call order."""
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def push_day_markdown() -> str:
    """A full AI-generated style workout with sections, a nested superset and trailing notes."""
    return """# Push Day - Compound Focus
@tags: push, chest, shoulders, triceps
@units: lbs

## Warmup

### Arm Circles
- 30s forward
- 30s backward

### Band Pull-Aparts
- 15
- 15

### Push-up to Downward Dog
- 8

### Empty Bar Overhead Press
- 45 x 10
- 45 x 8

## Workout

### Bench Press
- 135 x 8
- 185 x 6 @rpe: 6
- 205 x 5 @rpe: 7
- 225 x 4 @rpe: 8
- 225 x 4 @rpe: 9 @rest: 180s

### Overhead Press
- 95 x 8
- 115 x 6 @rpe: 7
- 125 x 5 @rpe: 8 @rest: 120s

### Incline Dumbbell Press
- 50 x 10
- 60 x 8 @rpe: 7
- 65 x 8 @rpe: 8

### Dips
- bw x 10
- bw x 8 @rpe: 8
- bw x AMRAP

### Superset: Shoulder & Tricep Finisher
#### Lateral Raises
- 20 x 12
- 25 x 10
#### Tricep Pushdowns
- 50 x 12
- 60 x 10

## Core

### Hanging Leg Raises
- 10
- 10
- 10 @rest: 60s

### Dead Bug
- 12 each side
- 12 each side

## Cool Down

### Doorway Chest Stretch
- 45s each side

### Overhead Tricep Stretch
- 30s each arm

### Thread the Needle
- 30s each side

### Child's Pose
- 60s
"""
