import json
import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter

from glowai import config
from glowai.ai.SkinModel import round_half_up
from glowai.models.Product import (
    BUDGET_THRESHOLDS,
    Product,
    ProductCategory,
    ProductRecommendation,
)
from glowai.models.Profile import UserProfile
from glowai.models.Response import SkinAnalysisResult
from glowai.models.Skin import SkinConcern

logger = logging.getLogger(__name__)

WEIGHTS = {
    "concern_match": 35,
    "skin_type_match": 20,
    "preference_match": 15,
    "budget_match": 10,
    "rating": 10,
    "popularity": 5,
    "ingredient_bonus": 5,
}

OVER_BUDGET_CREDIT = 0.3
NEUTRAL_CREDIT = 0.5

MAX_REASONS = 4
MAX_ALTERNATIVES = 2

ROUTINE_CATEGORIES = [
    ProductCategory.CLEANSER,
    ProductCategory.TONER,
    ProductCategory.SERUM,
    ProductCategory.MOISTURIZER,
    ProductCategory.SUNSCREEN,
    ProductCategory.EYE_CREAM,
]

# Active ingredients known to work for each concern, matched as substrings
HERO_INGREDIENTS: Dict[SkinConcern, List[str]] = {
    SkinConcern.ACNE: ["Salicylic Acid", "Benzoyl Peroxide", "Niacinamide", "Tea Tree", "BHA", "Zinc"],
    SkinConcern.DARK_SPOTS: ["Vitamin C", "Azelaic Acid", "Alpha Arbutin", "Kojic Acid", "Niacinamide"],
    SkinConcern.FINE_LINES: ["Retinol", "Peptides", "Hyaluronic Acid", "Vitamin C", "Bakuchiol"],
    SkinConcern.WRINKLES: ["Retinol", "Retinal", "Peptides", "Collagen", "Vitamin C"],
    SkinConcern.LARGE_PORES: ["Niacinamide", "BHA", "Salicylic Acid", "Clay", "AHA"],
    SkinConcern.UNEVEN_TONE: ["Vitamin C", "AHA", "Niacinamide", "Azelaic Acid", "Licorice Root"],
    SkinConcern.DULLNESS: ["Vitamin C", "AHA", "Glycolic Acid", "Lactic Acid", "Niacinamide"],
    SkinConcern.DRYNESS: ["Hyaluronic Acid", "Ceramides", "Squalane", "Glycerin", "Shea Butter"],
    SkinConcern.OILINESS: ["Niacinamide", "BHA", "Salicylic Acid", "Clay", "Zinc"],
    SkinConcern.REDNESS: ["Centella Asiatica", "Cica", "Aloe Vera", "Green Tea", "Chamomile", "Azelaic Acid"],
    SkinConcern.SENSITIVITY: ["Ceramides", "Centella Asiatica", "Aloe Vera", "Oat Extract", "Allantoin"],
    SkinConcern.DARK_CIRCLES: ["Caffeine", "Vitamin K", "Retinol", "Peptides", "Niacinamide"],
    SkinConcern.HYPERPIGMENTATION: ["Vitamin C", "Azelaic Acid", "Alpha Arbutin", "Tranexamic Acid", "AHA"],
    SkinConcern.TEXTURE: ["AHA", "BHA", "Retinol", "Glycolic Acid", "Lactic Acid", "PHA"],
    SkinConcern.BLACKHEADS: ["BHA", "Salicylic Acid", "Niacinamide", "Charcoal", "Clay"],
    SkinConcern.WHITEHEADS: ["BHA", "Salicylic Acid", "Benzoyl Peroxide", "Retinol"],
    SkinConcern.SUN_DAMAGE: ["Vitamin C", "Retinol", "AHA", "Niacinamide", "SPF"],
    SkinConcern.SCARRING: ["Retinol", "Vitamin C", "AHA", "Centella Asiatica", "Rosehip Oil"],
    SkinConcern.ECZEMA: ["Ceramides", "Colloidal Oatmeal", "Shea Butter", "Allantoin"],
    SkinConcern.ROSACEA: ["Azelaic Acid", "Centella Asiatica", "Green Tea", "Niacinamide"],
    SkinConcern.MELASMA: ["Azelaic Acid", "Vitamin C", "Tranexamic Acid", "Alpha Arbutin", "Kojic Acid"],
}

_catalog_adapter = TypeAdapter(List[Product])


def hero_ingredients_in(product: Product, concern: SkinConcern) -> List[str]:
    """Key ingredients of the product that contain one of the concern's hero ingredients."""
    heroes = [hero.lower() for hero in HERO_INGREDIENTS.get(concern, [])]
    return [
        ingredient for ingredient in product.key_ingredients
        if any(hero in ingredient.lower() for hero in heroes)
    ]


class ProductRecommendationService:
    def __init__(self, catalog_path: Optional[Path] = None, products: Optional[Sequence[Product]] = None):
        self.catalog_path = Path(catalog_path or config.CATALOG_PATH)
        self.products_cache: Optional[List[Product]] = list(products) if products is not None else None

    @property
    def products(self) -> List[Product]:
        """The catalog, read from disk on first use."""
        if self.products_cache is None:
            self.products_cache = self.load_catalog()
        return self.products_cache

    def load_catalog(self) -> List[Product]:
        with open(self.catalog_path, "r", encoding="utf-8") as f:
            products = _catalog_adapter.validate_python(json.load(f))
        logger.info(f"Loaded {len(products)} products from {self.catalog_path.name}")
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def list_products(self, category: Optional[ProductCategory] = None) -> List[Product]:
        return [p for p in self.products if category is None or p.category == category]

    # ── scoring ────────────────────────────────────────────────

    @staticmethod
    def _preference_credit(product: Product, profile: Optional[UserProfile]) -> float:
        if profile is None:
            return NEUTRAL_CREDIT
        prefs = profile.preferences
        checks = [
            (prefs.prefer_cruelty_free, product.is_cruelty_free),
            (prefs.prefer_vegan, product.is_vegan),
            (prefs.prefer_fragrance_free, product.is_fragrance_free),
            (prefs.prefer_natural, product.is_natural),
        ]
        enabled = [satisfied for wanted, satisfied in checks if wanted]
        if not enabled:
            return NEUTRAL_CREDIT
        return sum(enabled) / len(enabled)

    @staticmethod
    def _budget_credit(product: Product, profile: Optional[UserProfile]) -> float:
        budget = profile.preferences.budget_range if profile else None
        if budget is None:
            return NEUTRAL_CREDIT
        # over budget is penalized, never excluded
        return 1.0 if product.price <= BUDGET_THRESHOLDS[budget] else OVER_BUDGET_CREDIT

    def score(
        self,
        product: Product,
        concerns: Sequence[SkinConcern],
        profile: Optional[UserProfile] = None,
        analysis: Optional[SkinAnalysisResult] = None,
    ) -> int:
        """
        Weighted 0-100 match between a product and the user.

        Every term is bounded by its weight and the weights sum to 100.
        """
        concerns = list(dict.fromkeys(concerns))
        score = 0.0

        if concerns:
            matched = sum(1 for c in concerns if c in product.target_concerns)
            score += matched / len(concerns) * WEIGHTS["concern_match"]

        skin_type = analysis.skin_type_detected if analysis else (profile.skin_type if profile else None)
        if skin_type is not None and skin_type in product.suitable_skin_types:
            score += WEIGHTS["skin_type_match"]

        score += self._preference_credit(product, profile) * WEIGHTS["preference_match"]
        score += self._budget_credit(product, profile) * WEIGHTS["budget_match"]

        score += product.rating / 5 * WEIGHTS["rating"]

        # log scale, saturates at 100k reviews
        popularity = min(1.0, math.log10(product.review_count + 1) / 5)
        score += popularity * WEIGHTS["popularity"]

        if concerns:
            hits = sum(1 for c in concerns if hero_ingredients_in(product, c))
            score += hits / len(concerns) * WEIGHTS["ingredient_bonus"]

        return round_half_up(score)

    def match_reasons(
        self,
        product: Product,
        concerns: Sequence[SkinConcern],
        profile: Optional[UserProfile] = None,
    ) -> List[str]:
        concerns = list(dict.fromkeys(concerns))
        reasons: List[str] = []

        matched = [c for c in concerns if c in product.target_concerns]
        if matched:
            reasons.append(f"Targets your concerns: {', '.join(c.label for c in matched)}")

        for concern in concerns:
            ingredients = hero_ingredients_in(product, concern)
            if ingredients:
                reasons.append(f"Contains {', '.join(ingredients)}, proven for {concern.label}")

        if profile is not None and profile.skin_type in product.suitable_skin_types:
            reasons.append(f"Suitable for {profile.skin_type.value} skin")

        if product.rating >= 4.5:
            reasons.append(f"Highly rated ({product.rating}/5 from {product.review_count:,} reviews)")

        if profile is not None:
            if profile.preferences.prefer_cruelty_free and product.is_cruelty_free:
                reasons.append("Cruelty-free")
            if profile.preferences.prefer_vegan and product.is_vegan:
                reasons.append("Vegan")

        return reasons[:MAX_REASONS]

    # ── ranking ────────────────────────────────────────────────

    def _rank(
        self,
        products: Sequence[Product],
        concerns: Sequence[SkinConcern],
        profile: Optional[UserProfile],
        analysis: Optional[SkinAnalysisResult],
    ) -> List[ProductRecommendation]:
        scored: List[Tuple[Product, int]] = [
            (product, self.score(product, concerns, profile, analysis)) for product in products
        ]
        # sorted() is stable: ties keep catalog order
        scored.sort(key=lambda item: item[1], reverse=True)

        ranked = []
        for product, match_score in scored:
            alternatives = [
                other.id for other, _ in scored
                if other.category == product.category and other.id != product.id
            ][:MAX_ALTERNATIVES]
            ranked.append(ProductRecommendation(
                product=product,
                match_score=match_score,
                match_reasons=self.match_reasons(product, concerns, profile),
                alternative_ids=alternatives,
            ))
        return ranked

    def get_recommendations(
        self,
        concerns: Sequence[SkinConcern],
        profile: Optional[UserProfile] = None,
        analysis: Optional[SkinAnalysisResult] = None,
        limit: int = 10,
    ) -> List[ProductRecommendation]:
        """Best `limit` products of the whole catalog, highest match first."""
        return self._rank(self.products, concerns, profile, analysis)[:limit]

    def get_recommendations_by_category(
        self,
        category: ProductCategory,
        concerns: Sequence[SkinConcern],
        profile: Optional[UserProfile] = None,
        analysis: Optional[SkinAnalysisResult] = None,
    ) -> List[ProductRecommendation]:
        return self._rank(self.list_products(category), concerns, profile, analysis)

    def get_routine_recommendations(
        self,
        concerns: Sequence[SkinConcern],
        profile: Optional[UserProfile] = None,
        analysis: Optional[SkinAnalysisResult] = None,
    ) -> Dict[ProductCategory, List[ProductRecommendation]]:
        """Ranked candidates for every step of a basic routine."""
        return {
            category: self.get_recommendations_by_category(category, concerns, profile, analysis)
            for category in ROUTINE_CATEGORIES
        }


# Shared instance, the catalog is read-only
product_service = ProductRecommendationService()
