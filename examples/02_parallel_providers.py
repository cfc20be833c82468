"""02 — Same question, three adapters, in parallel.

Runs the analyze pipeline against every registered adapter with
asyncio.gather(). Adapters without a key report the configuration error;
set AGRI_MOCK_FALLBACK=true to see quota failures degrade to the mock answer.
"""

import asyncio
import sys
from pathlib import Path

from agri_vision import AnalyzeError, AnalyzeRequest, analyze, create_adapter
from agri_vision.providers import ADAPTERS


async def main():
    image = Path(sys.argv[1] if len(sys.argv) > 1 else "leaf.png")
    request = AnalyzeRequest.from_upload(
        image.read_bytes(),
        mime_type="image/png",
        question="Any problems with this crop?",
        file_name=image.name,
    )
    names = sorted(ADAPTERS)
    results = await asyncio.gather(
        *(analyze(request, create_adapter(name)) for name in names),
        return_exceptions=True,
    )

    for name, result in zip(names, results, strict=True):
        if isinstance(result, AnalyzeError):
            print(f"  {name}: {result.status_code} {result.title}: {result.detail}")
        elif isinstance(result, Exception):
            raise result
        else:
            note = f" [{result.note}]" if result.note else ""
            print(f"  {name}: {result.answer}{note}\n")


if __name__ == "__main__":
    asyncio.run(main())
