"""Bundled sample guideline, in the same camelCase shape brand teams hand over."""
from brand_compliance.models import BrandGuideline

SAMPLE_GUIDELINE_DOCUMENT = {
    "name": "TechFuture",
    "description": "A forward-thinking technology company focused on sustainable innovation",
    "toneGuidelines": {
        "primaryTone": "confident",
        "secondaryTones": ["optimistic", "innovative", "approachable"],
        "avoidedTones": ["pessimistic", "overly technical", "condescending"],
    },
    "voiceGuidelines": {
        "personality": "knowledgeable but accessible; a helpful expert",
        "usesContractions": True,
        "usesPronoun": {"firstPerson": True, "secondPerson": True},
    },
    "terminologyGuidelines": {
        "avoidedGlobalTerms": ["synergy", "leverage", "disruptive"],
        "terms": [
            {
                "preferred": "purchase",
                "alternatives": ["buy", "acquire"],
                "contexts": ["ecommerce", "sales", "customer-facing"],
                "notes": "Use 'purchase' in customer-facing transaction contexts.",
            },
            {
                "preferred": "artificial intelligence",
                "alternatives": ["AI"],
                "contexts": ["formal", "documentation", "external-marketing", "first-mention"],
                "notes": "Spell out on first use or in formal/external documents.",
            },
            {
                "preferred": "AI",
                "alternatives": ["artificial intelligence"],
                "contexts": ["internal", "technical", "social-media", "subsequent-mention"],
                "notes": "Abbreviation acceptable in informal/technical contexts or after first use.",
            },
            {
                "preferred": "user interface",
                "alternatives": ["UI"],
                "contexts": ["formal", "documentation", "first-mention"],
            },
            {
                "preferred": "UI",
                "alternatives": ["user interface"],
                "contexts": ["technical", "developer", "internal", "subsequent-mention"],
            },
            {
                "term": "bleeding edge",
                "avoidInContexts": ["marketing", "customer-facing", "formal"],
                "notes": "Avoid hype. Use 'innovative' or 'advanced' instead.",
            },
            {
                "term": "paradigm shift",
                "avoidInContexts": ["marketing", "customer-facing", "formal"],
                "notes": "Avoid hype.",
            },
        ],
    },
    "contextualAdjustments": [
        {
            "contexts": ["social-media", "blog-informal"],
            "applyRules": {
                "tone": "casual",
                "voice": {"usesContractions": True},
            },
        },
        {
            "contexts": ["technical-documentation", "support-knowledgebase", "api-reference"],
            "applyRules": {
                "tone": "professional",
                "voice": {"personality": "precise and helpful expert", "usesContractions": False},
            },
        },
        {
            "contexts": ["marketing-landingpage", "marketing-email-external"],
            "applyRules": {"tone": "optimistic"},
        },
    ],
}


def sample_guideline() -> BrandGuideline:
    return BrandGuideline.model_validate(SAMPLE_GUIDELINE_DOCUMENT)
