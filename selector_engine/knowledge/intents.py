"""
Intent Profiles - Pre-seeded Selector Knowledge per Intent

Every intent the engine understands carries one profile describing how
each discovery strategy should look for it. This is "Day 0" knowledge
that works on an unseen page without any learning.

The table is exhaustive over the Intent enum: adding an intent without
a profile fails at import time instead of silently producing an empty
candidate list.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from ..exceptions import UnknownIntentError


class Intent(str, Enum):
    """What the caller is trying to locate on the page"""
    SEARCH = "search"
    PRODUCT = "product"
    CART = "cart"
    LOGIN = "login"
    PRICE = "price"
    QUANTITY = "quantity"
    CHECKOUT = "checkout"
    PHONE = "phone"
    OTP = "otp"

    @classmethod
    def parse(cls, value: Union["Intent", str]) -> "Intent":
        """Coerce a caller-supplied string into an Intent"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownIntentError(value) from None


# Target name meaning "match on text content" instead of an attribute
TEXT_TARGET = "text"


@dataclass(frozen=True)
class FormField:
    """An input-characteristic selector and the attributes that make it relevant"""
    selector: str
    attributes: Tuple[str, ...]


@dataclass(frozen=True)
class HeuristicPattern:
    """A substring looked up in each target attribute, weighted by reliability"""
    pattern: str
    targets: Tuple[str, ...]
    weight: float


@dataclass(frozen=True)
class PositionalRule:
    """Where on screen a plausible element sits"""
    max_top_fraction: float = 0.25
    min_width: float = 200


@dataclass(frozen=True)
class IntentProfile:
    """Complete discovery knowledge for one intent"""
    semantic_selectors: Tuple[str, ...] = ()
    form_fields: Tuple[FormField, ...] = ()
    relevance_keywords: Tuple[str, ...] = ()
    heuristic_patterns: Tuple[HeuristicPattern, ...] = ()
    positional_rule: Optional[PositionalRule] = None


INTENT_PROFILES: Dict[Intent, IntentProfile] = {
    # ============================================================
    # SEARCH
    # ============================================================
    Intent.SEARCH: IntentProfile(
        semantic_selectors=(
            '[role="search"] input',
            '[role="searchbox"]',
            'input[type="search"]',
            '[aria-label*="search" i]',
            'form[role="search"] input',
        ),
        form_fields=(
            FormField('input:not([type])', ("placeholder", "id", "name", "class")),
            FormField('input[type="text"]', ("placeholder", "id", "name", "class")),
            FormField('textarea', ("placeholder", "id", "name")),
        ),
        relevance_keywords=("search", "query", "find", "lookup", "product"),
        heuristic_patterns=(
            HeuristicPattern("search", ("placeholder", "class", "id", "name"), 1.0),
            HeuristicPattern("find", ("placeholder", "class", "id"), 0.8),
            HeuristicPattern("look", ("placeholder", "class"), 0.7),
        ),
        positional_rule=PositionalRule(),
    ),

    # ============================================================
    # PRODUCT CARDS
    # ============================================================
    Intent.PRODUCT: IntentProfile(
        semantic_selectors=(
            '[role="article"]',
            '[role="listitem"]',
            'article',
            '[data-product]',
            '[data-item-type="product"]',
        ),
        heuristic_patterns=(
            HeuristicPattern("product", ("class", "data-testid", "id"), 1.0),
            HeuristicPattern("item", ("class", "data-testid"), 0.8),
            HeuristicPattern("card", ("class",), 0.6),
        ),
    ),

    # ============================================================
    # CART
    # ============================================================
    Intent.CART: IntentProfile(
        semantic_selectors=(
            '[role="complementary"][aria-label*="cart" i]',
            '[aria-label*="cart" i]',
            '[data-testid*="cart" i]',
            'button:has-text("Cart")',
            'a:has-text("Cart")',
        ),
        heuristic_patterns=(
            HeuristicPattern("cart", ("class", "data-testid", "id"), 1.0),
            HeuristicPattern("basket", ("class", "id"), 0.8),
            HeuristicPattern("bag", ("class",), 0.6),
        ),
    ),

    # ============================================================
    # LOGIN
    # ============================================================
    Intent.LOGIN: IntentProfile(
        semantic_selectors=(
            'button:has-text("Login")',
            'button:has-text("Sign in")',
            'a:has-text("Login")',
            'button:has-text("Log in")',
            '[aria-label*="login" i]',
        ),
        form_fields=(
            FormField('input[type="email"]', ("name", "id", "placeholder")),
            FormField('input[autocomplete="username"]', ("autocomplete", "name")),
        ),
        relevance_keywords=("login", "signin", "auth", "user"),
        heuristic_patterns=(
            HeuristicPattern("login", ("class", "data-testid", "id"), 1.0),
            HeuristicPattern("signin", ("class", "id"), 0.8),
        ),
    ),

    # ============================================================
    # PRICE
    # ============================================================
    Intent.PRICE: IntentProfile(
        semantic_selectors=(
            '[data-testid*="price" i]',
            'span:has-text("₹")',
            'div:has-text("₹")',
            '[aria-label*="price" i]',
            'span[class*="price" i]',
        ),
        heuristic_patterns=(
            HeuristicPattern("price", ("class", "data-testid", "id"), 1.0),
            HeuristicPattern("cost", ("class",), 0.8),
            HeuristicPattern("amount", ("class",), 0.7),
            HeuristicPattern("rs", ("class",), 0.6),
            HeuristicPattern("₹", (TEXT_TARGET,), 1.0),
        ),
    ),

    # ============================================================
    # QUANTITY
    # ============================================================
    Intent.QUANTITY: IntentProfile(
        semantic_selectors=(
            '[aria-label*="quantity" i]',
            '[data-testid*="quantity" i]',
            '[role="spinbutton"]',
        ),
        form_fields=(
            FormField('input[type="number"]', ("name", "id", "aria-label", "class")),
            FormField('select', ("name", "id", "aria-label")),
        ),
        relevance_keywords=("qty", "quantity", "count"),
        heuristic_patterns=(
            HeuristicPattern("quantity", ("class", "data-testid", "name"), 1.0),
            HeuristicPattern("qty", ("class", "name"), 0.8),
        ),
    ),

    # ============================================================
    # CHECKOUT
    # ============================================================
    Intent.CHECKOUT: IntentProfile(
        semantic_selectors=(
            '[data-testid*="checkout" i]',
            '[aria-label*="checkout" i]',
            'button:has-text("Checkout")',
            'button:has-text("Proceed to pay")',
            'a[href*="checkout" i]',
        ),
        heuristic_patterns=(
            HeuristicPattern("checkout", ("class", "data-testid", "id"), 1.0),
            HeuristicPattern("pay", ("class", "data-testid"), 0.7),
        ),
    ),

    # ============================================================
    # PHONE NUMBER ENTRY
    # ============================================================
    Intent.PHONE: IntentProfile(
        semantic_selectors=(
            'input[autocomplete="tel"]',
            '[aria-label*="phone" i]',
            '[aria-label*="mobile" i]',
        ),
        form_fields=(
            FormField('input[type="tel"]', ("type",)),
            FormField('input[pattern*="[0-9]"]', ("pattern",)),
            FormField('input[maxlength="10"]', ("maxlength",)),
            FormField('input[placeholder*="phone" i]', ("placeholder",)),
        ),
        relevance_keywords=("phone", "mobile", "number", "tel", "contact"),
        heuristic_patterns=(
            HeuristicPattern("phone", ("placeholder", "name", "id"), 1.0),
            HeuristicPattern("mobile", ("placeholder", "name", "id"), 0.9),
        ),
    ),

    # ============================================================
    # ONE-TIME CODE
    # ============================================================
    Intent.OTP: IntentProfile(
        semantic_selectors=(
            'input[autocomplete="one-time-code"]',
            '[aria-label*="otp" i]',
        ),
        form_fields=(
            FormField('input[type="number"]', ("type", "maxlength")),
            FormField('input[maxlength="6"]', ("maxlength",)),
            FormField('input[minlength="6"]', ("minlength",)),
            FormField('input[autocomplete="one-time-code"]', ("autocomplete",)),
        ),
        relevance_keywords=("otp", "code", "verify", "verification", "pin"),
        heuristic_patterns=(
            HeuristicPattern("otp", ("placeholder", "name", "id", "class"), 1.0),
            HeuristicPattern("code", ("placeholder", "name"), 0.7),
        ),
    ),
}


_missing = [intent.value for intent in Intent if intent not in INTENT_PROFILES]
if _missing:
    raise RuntimeError(f"Intent profiles missing for: {', '.join(_missing)}")
del _missing


def get_profile(intent: Union[Intent, str]) -> IntentProfile:
    """Get the discovery profile for an intent"""
    return INTENT_PROFILES[Intent.parse(intent)]
