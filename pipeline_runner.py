import json
import logging
import sys
from typing import Any, Dict, List, Optional

from shared.models import ProductCandidate
from services.content_analysis.pipeline import analyze_with_insights, recommend

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("PipelineRunner")


class PipelineRunner:
    """
    Offline batch run of the content pipeline, for tuning the heuristics.
    Nothing is persisted.

    pages file:    [{"url": ..., "title": ..., "content": ...}, ...]
    products file: [{"id": ..., "name": ..., "description": ..., "category": ..., "commission_rate": ...}, ...]
    """

    def __init__(self, products: Optional[List[ProductCandidate]] = None):
        self.products = products or []

    @staticmethod
    def load_json(path: str) -> List[Dict[str, Any]]:
        with open(path, "r") as f:
            return json.load(f)

    def run_page(self, page: Dict[str, Any]) -> Dict[str, Any]:
        analysis, insights = analyze_with_insights(
            page.get("title", ""), page.get("content", ""), content_url=page.get("url")
        )
        recommendations = recommend(analysis.keywords, analysis.category, self.products)
        return {
            "analysis": analysis.model_dump(by_alias=True, mode="json"),
            "insights": insights.model_dump(by_alias=True, mode="json"),
            "recommendations": [r.model_dump(by_alias=True, mode="json") for r in recommendations],
        }

    def run(self, pages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        results = []
        for page in pages:
            result = self.run_page(page)
            a = result["analysis"]
            logger.info(
                f"{page.get('url') or '<no url>'}: category={a['category']} "
                f"intent={a['buyingIntentScore']:.2f} quality={a['qualityScore']} "
                f"sentiment={a['sentiment']} recommendations={len(result['recommendations'])}"
            )
            results.append(result)
        return results


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Analyze a batch of pages offline")
    parser.add_argument("pages", type=str, help="JSON file with a list of pages")
    parser.add_argument("--products", type=str, help="JSON file with candidate products")
    parser.add_argument("--output", type=str, help="Write results here instead of stdout")
    args = parser.parse_args()

    products = []
    if args.products:
        products = [ProductCandidate(**p) for p in PipelineRunner.load_json(args.products)]

    runner = PipelineRunner(products)
    results = runner.run(runner.load_json(args.pages))

    if args.output:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        logger.info(f"Wrote {len(results)} results to {args.output}")
    else:
        json.dump(results, sys.stdout, indent=2)
