"""Scrapewise - selector inference for structured web extraction

Simple CLI for analyzing a page or serving the HTTP API.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from scrapewise.config import settings
from scrapewise.inference.engine import StructureInferenceEngine
from scrapewise.services.renderer import PageRenderer, RenderError


async def run_analysis(
    prompt: str,
    *,
    url: str | None = None,
    html_file: str | None = None,
    use_ai: bool = True,
) -> dict:
    """Analyze a URL or a local HTML file and return the analysis with a preview."""
    if html_file:
        html = Path(html_file).read_text(encoding="utf-8")
        source = html_file
    else:
        page = await PageRenderer.from_settings().render(url)
        html = page.html
        source = page.final_url

    engine = StructureInferenceEngine.from_settings()
    analysis = await engine.analyze(html, prompt, use_ai=use_ai)
    records = engine.preview(html, analysis.selectors)

    return {
        "analysis": analysis.model_dump(by_alias=True),
        "preview": records[: settings.preview_limit],
        "totalElements": len(records),
        "url": source,
    }


def serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("scrapewise.main:app", host=host, port=port)


def main():
    parser = argparse.ArgumentParser(description="Scrapewise selector inference")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Infer selectors for a page")
    target = analyze_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--url", "-u", help="Page URL to render and analyze")
    target.add_argument("--file", "-f", help="Local HTML file to analyze")
    analyze_parser.add_argument("--prompt", "-p", default="", help="What data to extract")
    analyze_parser.add_argument("--no-ai", action="store_true", help="Skip the inference service")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)

    args = parser.parse_args()

    if args.command == "serve":
        serve(args.host, args.port)
        return

    try:
        result = asyncio.run(
            run_analysis(
                args.prompt,
                url=args.url,
                html_file=args.file,
                use_ai=not args.no_ai,
            )
        )
    except RenderError as exc:
        print(f"[!] Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
