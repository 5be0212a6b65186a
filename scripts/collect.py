#!/usr/bin/env python3
"""
Component Screenshot Browser - Variant Capture
Screenshots component variants (e.g. Storybook stories) with Playwright and
names each file so the catalog can parse it back.
"""

import argparse
import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set
from urllib.parse import urljoin

try:
    from playwright.async_api import async_playwright, Browser, Page
except ImportError:
    print("ERROR: playwright not installed. Run: pip install playwright && playwright install chromium")
    raise SystemExit(1)

from catalog import DEFAULT_SCREENSHOTS_DIR
from filename_parser import build_filename, naming_problem


DEFAULT_VIEWPORT = {"width": 1280, "height": 800}

RESULTS_FILENAME = "capture-results.json"


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def now_iso() -> str:
    return datetime.now().isoformat()


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def parse_viewport(raw: Optional[str]) -> Dict[str, int]:
    if not raw or "x" not in raw.lower():
        return DEFAULT_VIEWPORT
    width_str, height_str = raw.lower().split("x", 1)
    try:
        return {"width": int(width_str), "height": int(height_str)}
    except ValueError:
        return DEFAULT_VIEWPORT


@dataclass
class VariantSpec:
    component: str
    state: str = "default"
    properties: Dict[str, Any] = field(default_factory=dict)
    path: str = "/"
    selector: Optional[str] = None
    full_page: bool = False

    @property
    def filename(self) -> str:
        return build_filename(self.component, self.state, self.properties)


def parse_variants(raw: Optional[str]) -> List[VariantSpec]:
    """Load a JSON manifest: a list of variants or ``{"variants": [...]}``."""
    if not raw:
        return []
    path = Path(raw)
    if not path.exists():
        return []
    try:
        data = json.loads(read_text(path))
    except (OSError, ValueError):
        return []
    if isinstance(data, dict):
        data = data.get("variants", [])
    if not isinstance(data, list):
        return []

    variants = []
    for item in data:
        if not isinstance(item, dict) or not item.get("component"):
            continue
        properties = item.get("properties") or {}
        variants.append(VariantSpec(
            component=str(item["component"]),
            state=str(item.get("state") or "default"),
            properties=properties if isinstance(properties, dict) else {},
            path=str(item.get("path") or "/"),
            selector=item.get("selector"),
            full_page=bool(item.get("full_page", False)),
        ))
    return variants


class VariantCollector:
    def __init__(
        self,
        base_url: str,
        output_dir: str,
        variants: List[VariantSpec],
        viewport: Optional[Dict[str, int]] = None,
        settle_ms: int = 500,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.output_dir = Path(output_dir)
        self.variants = variants
        self.viewport = viewport or DEFAULT_VIEWPORT
        self.settle_ms = settle_ms
        ensure_dir(self.output_dir)

        self.captured: List[Dict[str, Any]] = []
        self.limits: List[str] = []
        self.claimed: Set[str] = set()

    async def collect_all(self) -> Dict[str, Any]:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            for variant in self.variants:
                await self.collect_variant(browser, variant)
            await browser.close()

        results = self.build_results()
        results_path = self.output_dir / RESULTS_FILENAME
        write_json(results_path, results)

        print(f"\n✅ Captured {len(self.captured)}/{len(self.variants)} variants")
        print(f"Screenshots: {self.output_dir}")
        if self.limits:
            print(f"⚠️  {len(self.limits)} variants failed or skipped, see {results_path}")
        return results

    async def collect_variant(self, browser: Browser, variant: VariantSpec) -> Optional[Path]:
        url = urljoin(self.base_url, variant.path.lstrip("/"))
        target = self.output_dir / variant.filename

        problem = naming_problem(variant.component, variant.state, variant.properties)
        if problem:
            self.limits.append(f"Skipped {variant.filename}: {problem}")
            return None
        if target.name in self.claimed:
            self.limits.append(f"Skipped {variant.filename}: duplicate of an earlier variant")
            return None
        self.claimed.add(target.name)

        stage = "init"
        context = await browser.new_context(viewport=self.viewport, device_scale_factor=1)
        page = await context.new_page()
        try:
            stage = "goto"
            await page.goto(url, wait_until="domcontentloaded", timeout=60000)
            try:
                stage = "wait_networkidle"
                await page.wait_for_load_state("networkidle", timeout=15000)
            except Exception:
                pass
            stage = "post_wait"
            await page.wait_for_timeout(self.settle_ms)

            stage = "screenshot"
            await self.capture_screenshot(page, variant, target)
            self.captured.append({
                "component": variant.component,
                "state": variant.state,
                "properties": variant.properties,
                "url": url,
                "file": target.name,
            })
            return target
        except Exception as exc:
            self.limits.append(f"Failed to capture {variant.filename} at {stage}: {exc}")
            return None
        finally:
            await context.close()

    async def capture_screenshot(self, page: Page, variant: VariantSpec, target: Path) -> None:
        if variant.selector:
            element = await page.query_selector(variant.selector)
            if element is None:
                raise ValueError(f"selector not found: {variant.selector}")
            await element.screenshot(path=str(target))
            return
        await page.screenshot(path=str(target), full_page=variant.full_page)

    def build_results(self) -> Dict[str, Any]:
        return {
            "meta": {
                "base_url": self.base_url,
                "collected_at": now_iso(),
                "viewport": f"{self.viewport['width']}x{self.viewport['height']}",
            },
            "captured": self.captured,
            "notes": ["Limits:"] + self.limits if self.limits else ["Limits: none detected"],
        }


async def main_async(args: argparse.Namespace) -> None:
    variants = parse_variants(args.manifest)
    if not variants:
        print(f"❌ No variants found in {args.manifest}")
        raise SystemExit(1)
    collector = VariantCollector(
        base_url=args.base_url,
        output_dir=args.output,
        variants=variants,
        viewport=parse_viewport(args.viewport),
        settle_ms=args.settle_ms,
    )
    await collector.collect_all()


def main() -> None:
    parser = argparse.ArgumentParser(description="Capture component variant screenshots")
    parser.add_argument("base_url", help="Base URL of the component playground (e.g. Storybook iframe host)")
    parser.add_argument("manifest", help="JSON manifest of variants to capture")
    parser.add_argument("--output", "-o", default=DEFAULT_SCREENSHOTS_DIR, help="Screenshots directory")
    parser.add_argument("--viewport", help="Viewport size, e.g. 1280x800")
    parser.add_argument("--settle-ms", type=int, default=500, help="Wait after load before capturing")

    args = parser.parse_args()
    asyncio.run(main_async(args))


if __name__ == "__main__":
    main()
