"""Static mandi-price and government-scheme datasets plus their filtered views."""

from __future__ import annotations

from collections.abc import Sequence

from kissan.schemas.market import (
	ALL_FILTER,
	MarketQuote,
	MarketResponse,
	Scheme,
	SchemeMeta,
	SchemeResponse,
)
from kissan.services.normalizers import filter_quotes, filter_schemes, market_meta

MARKET_DATA: tuple[MarketQuote, ...] = tuple(
	MarketQuote(**row)
	for row in (
		{"id": 1, "state": "Punjab", "market": "Khanna", "commodity": "Wheat", "min_price": 2100, "max_price": 2350, "modal_price": 2275, "date": "2024-03-15", "trend": "up"},
		{"id": 2, "state": "Punjab", "market": "Ludhiana", "commodity": "Rice (Basmati)", "min_price": 3500, "max_price": 4200, "modal_price": 3950, "date": "2024-03-15", "trend": "stable"},
		{"id": 3, "state": "Haryana", "market": "Karnal", "commodity": "Wheat", "min_price": 2150, "max_price": 2380, "modal_price": 2300, "date": "2024-03-15", "trend": "up"},
		{"id": 4, "state": "Haryana", "market": "Ambala", "commodity": "Potato", "min_price": 600, "max_price": 850, "modal_price": 750, "date": "2024-03-15", "trend": "down"},
		{"id": 5, "state": "Maharashtra", "market": "Pune", "commodity": "Onion", "min_price": 1200, "max_price": 1800, "modal_price": 1550, "date": "2024-03-15", "trend": "up"},
		{"id": 6, "state": "Maharashtra", "market": "Nashik", "commodity": "Tomato", "min_price": 1500, "max_price": 2200, "modal_price": 1900, "date": "2024-03-15", "trend": "down"},
		{"id": 7, "state": "Uttar Pradesh", "market": "Agra", "commodity": "Potato", "min_price": 650, "max_price": 900, "modal_price": 800, "date": "2024-03-15", "trend": "stable"},
		{"id": 8, "state": "Madhya Pradesh", "market": "Indore", "commodity": "Soybean", "min_price": 4200, "max_price": 4800, "modal_price": 4600, "date": "2024-03-15", "trend": "up"},
		{"id": 9, "state": "Rajasthan", "market": "Jaipur", "commodity": "Mustard", "min_price": 4800, "max_price": 5300, "modal_price": 5100, "date": "2024-03-15", "trend": "down"},
		{"id": 10, "state": "Gujarat", "market": "Surat", "commodity": "Cotton", "min_price": 6500, "max_price": 7200, "modal_price": 6900, "date": "2024-03-15", "trend": "up"},
	)
)

SCHEMES_DATA: tuple[Scheme, ...] = (
	Scheme(
		id=1,
		title="PM-KISAN Samman Nidhi",
		description="Financial benefit of ₹6,000/- per year in three equal installments to all landholding farmers families.",
		category="Financial",
		deadline="Open Year-Round",
		status="Active",
		link="https://pmkisan.gov.in/",
		tags=["Central", "Direct Transfer"],
	),
	Scheme(
		id=2,
		title="Pradhan Mantri Fasal Bima Yojana (PMFBY)",
		description="One Nation One Scheme for crop insurance. Provides comprehensive insurance cover against failure of crop.",
		category="Insurance",
		deadline="31st July (Kharif)",
		status="Closing Soon",
		link="https://pmfby.gov.in/",
		tags=["Insurance", "Risk Cover"],
	),
	Scheme(
		id=3,
		title="Kisan Credit Card (KCC)",
		description="Adequate and timely credit support from the banking system under a single window with flexible and simplified procedure.",
		category="Credit",
		deadline="Open Year-Round",
		status="Active",
		link="https://www.myscheme.gov.in/schemes/kcc",
		tags=["Loan", "Low Interest"],
	),
	Scheme(
		id=4,
		title="Soil Health Card Scheme",
		description="Assisting states to issue soil health cards to all farmers once in a cycle of 3 years. Helps in optimal nutrient usage.",
		category="Technical",
		deadline="Ongoing Cycle",
		status="Active",
		link="https://soilhealth.dac.gov.in/",
		tags=["Soil", "Lab Test"],
	),
	Scheme(
		id=5,
		title="PM Krishi Sinchai Yojana (PMKSY)",
		description="More crop per drop. Subsidies for drip and sprinkler irrigation systems to improve water use efficiency.",
		category="Subsidy",
		deadline="State-wise",
		status="Active",
		link="https://pmksy.gov.in/",
		tags=["Irrigation", "Subsidy"],
	),
	Scheme(
		id=6,
		title="e-NAM (National Agriculture Market)",
		description="Pan-India electronic trading portal which networks the existing APMC mandis to create a unified national market.",
		category="Market",
		deadline="Registration Open",
		status="Active",
		link="https://www.enam.gov.in/",
		tags=["Trade", "Online Mandi"],
	),
)


class CatalogService:
	"""Read-only views over the bundled datasets."""

	def __init__(
		self,
		quotes: Sequence[MarketQuote] = MARKET_DATA,
		schemes: Sequence[Scheme] = SCHEMES_DATA,
	):
		self.quotes = quotes
		self.schemes = schemes

	def market(
		self,
		*,
		state: str | None = None,
		commodity: str | None = None,
		search: str | None = None,
	) -> MarketResponse:
		data = filter_quotes(self.quotes, state=state, commodity=commodity, search=search)
		return MarketResponse(data=data, meta=market_meta(self.quotes, len(data)))

	def schemes_view(self, *, category: str | None = None, search: str | None = None) -> SchemeResponse:
		data = filter_schemes(self.schemes, category=category, search=search)
		categories = [ALL_FILTER, *dict.fromkeys(scheme.category for scheme in self.schemes)]
		return SchemeResponse(data=data, meta=SchemeMeta(categories=categories, total=len(data)))
