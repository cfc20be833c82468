"""01 — Ask Gemini about a field photo.

Minimal starting point: create an adapter, send one image and one
question, print the answer. Needs ``GEMINI_API_KEY``.
"""

import os
import sys
from pathlib import Path

from agri_vision import create_adapter

image = Path(sys.argv[1] if len(sys.argv) > 1 else "leaf.png")

adapter = create_adapter("gemini")
answer = adapter.invoke(
    image.read_bytes(),
    "image/png",
    "What crop is this and what are the potential issues?",
    os.environ["GEMINI_API_KEY"],
)
print("Answer:", answer or "(empty answer)")
