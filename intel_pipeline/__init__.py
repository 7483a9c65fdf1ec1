"""
Competitive Intelligence Agent Pipeline

This package contains:
- Gemini gateway (Gemini API or Vertex AI)
- five pipeline stages: router, hunter, scraper, analyst, reporter
- per-stage log records with latency / token / cost accounting
- follow-up chat session seeded with the final report

Entry point:
- python -m intel_pipeline.pipeline "Analyze Acme Corp pricing"
"""
