"""
Default Scoring Configs - Company Scoring Platform
app/services/seed.py

Rubrics installed into an empty config store at startup.
"""

import logging
from typing import List, Tuple

from app.models.scoring_config import Criterion, ScoringConfigCreate
from app.repositories.config_repository import ConfigRepository

logger = logging.getLogger(__name__)


DEFAULT_CONFIGS: List[Tuple[str, ScoringConfigCreate]] = [
    (
        "config-default",
        ScoringConfigCreate(
            name="Default Evaluation",
            description="Balanced evaluation across five key dimensions for general company assessment.",
            scale="1-10",
            criteria=[
                Criterion(id="mp", name="Market Position", weight=20,
                          description="Evaluates the company's competitive standing and market share.",
                          research_guidance="Look for market share data, competitive landscape, brand recognition."),
                Criterion(id="fh", name="Financial Health", weight=20,
                          description="Assesses financial stability, revenue growth, and profitability.",
                          research_guidance="Research revenue, growth rates, profitability, debt levels, funding."),
                Criterion(id="pt", name="Product/Technology", weight=20,
                          description="Evaluates quality, innovation, and technical differentiation.",
                          research_guidance="Analyze product reviews, tech stack, patents, innovation pipeline."),
                Criterion(id="tl", name="Team & Leadership", weight=20,
                          description="Assesses experience and capability of leadership team.",
                          research_guidance="Research founders, C-suite backgrounds, key hires, culture."),
                Criterion(id="gp", name="Growth Potential", weight=20,
                          description="Evaluates future growth trajectory and expansion opportunities.",
                          research_guidance="Look for TAM analysis, growth vectors, expansion plans."),
            ],
            evaluation_prompt=(
                "Evaluate the company across all criteria using available public information. "
                "Provide balanced, evidence-based assessments."
            ),
            is_default=True,
        ),
    ),
    (
        "config-saas",
        ScoringConfigCreate(
            name="SaaS Evaluation",
            description=(
                "Specialized configuration for evaluating SaaS companies with focus on "
                "recurring revenue and unit economics."
            ),
            scale="1-10",
            criteria=[
                Criterion(id="arr", name="ARR & Revenue Quality", weight=25,
                          description="Annual recurring revenue and predictability.",
                          research_guidance="Look for ARR, NRR, MRR growth, churn rates."),
                Criterion(id="ue", name="Unit Economics", weight=20,
                          description="CAC, LTV, payback period, and gross margins.",
                          research_guidance="Research customer acquisition costs, LTV ratios."),
                Criterion(id="pm", name="Product-Market Fit", weight=20,
                          description="Evidence of strong product-market fit.",
                          research_guidance="Look for NPS scores, G2 reviews, testimonials."),
                Criterion(id="sc", name="Scalability", weight=15,
                          description="Ability to scale operations efficiently.",
                          research_guidance="Analyze infrastructure, automation, operational leverage."),
                Criterion(id="mo", name="Market Opportunity", weight=10,
                          description="Total addressable market size.",
                          research_guidance="Research TAM, SAM, SOM, market growth rates."),
                Criterion(id="tm", name="Team Quality", weight=10,
                          description="Founding team strength.",
                          research_guidance="Evaluate founder backgrounds, key leadership."),
            ],
            evaluation_prompt="Focus on SaaS-specific metrics and unit economics. Prioritize quantitative data.",
        ),
    ),
    (
        "config-pe",
        ScoringConfigCreate(
            name="PE Target Screen",
            description="Private equity target screening focused on acquisition suitability.",
            scale="1-100",
            criteria=[
                Criterion(id="fp", name="Financial Profile", weight=30,
                          description="EBITDA, margins, cash flow stability.",
                          research_guidance="Deep dive into financials, margins, cash flow."),
                Criterion(id="md", name="Market Dynamics", weight=25,
                          description="Market structure, competitive moat.",
                          research_guidance="Analyze industry structure, barriers to entry."),
                Criterion(id="ov", name="Operational Value-Add", weight=25,
                          description="Opportunities for post-acquisition improvement.",
                          research_guidance="Identify inefficiencies, bolt-on opportunities."),
                Criterion(id="ri", name="Risk Assessment", weight=20,
                          description="Key risks including regulatory and concentration.",
                          research_guidance="Evaluate risk factors: concentration, regulatory, tech obsolescence."),
            ],
            evaluation_prompt="Assess as a potential PE acquisition target. Focus on value creation and risk.",
        ),
    ),
]


def seed_default_configs(repo: ConfigRepository) -> int:
    """Create the default rubrics if the store holds no configs. Returns how many were added."""
    if repo.count() > 0:
        return 0
    for config_id, payload in DEFAULT_CONFIGS:
        repo.create(payload, config_id=config_id)
    logger.info("Seeded %d default scoring config(s)", len(DEFAULT_CONFIGS))
    return len(DEFAULT_CONFIGS)
