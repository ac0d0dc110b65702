"""
Analyze a single PDF resume from the command line and print the profile as JSON.
Run with: python analyze_resume.py path/to/resume.pdf [--heuristic-only]
"""
import argparse
import asyncio
import json
import sys

from resume_analyzer.exceptions import DocumentError
from resume_analyzer.services.merger import build_heuristic_profile
from resume_analyzer.services.pdf_parser import parse_pdf
from resume_analyzer.services.resume_analyzer import get_resume_analyzer


async def analyze_file(path: str, heuristic_only: bool) -> dict:
    with open(path, "rb") as f:
        document = parse_pdf(f.read())

    if heuristic_only:
        return {"model": None, "profile": build_heuristic_profile(document.lines).model_dump()}

    outcome = await get_resume_analyzer().analyze_document(document)
    return {"model": outcome.model, "profile": outcome.profile.model_dump()}


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", help="PDF resume to analyze")
    parser.add_argument("--heuristic-only", action="store_true", help="skip the Gemini call")
    args = parser.parse_args()

    try:
        result = asyncio.run(analyze_file(args.path, args.heuristic_only))
    except (OSError, DocumentError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
