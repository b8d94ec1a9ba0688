"""Keyword answers for common farming questions, used when the model is unreachable."""

from __future__ import annotations

SMART_ANSWERS: tuple[tuple[tuple[str, ...], str], ...] = (
	(
		("weather", "rain", "forecast", "cloud"),
		"I can't check live weather without an Internet connection tailored to your exact GPS, but generally: "
		"Check the 'Weather' tab for a 7-day forecast. If you see clouds, avoid spraying pesticides today.",
	),
	(
		("price", "rate", "cost", "mandi", "market"),
		"Market rates update daily. Currently, Wheat is trending around ₹2200/qt and Cotton around ₹6900/qt. "
		"For precise local rates, please visit the 'Market' page.",
	),
	(
		("pm kisan", "subsidy", "scheme", "money", "government"),
		"The PM-KISAN scheme provides ₹6000/year to eligible farmers. You can check your status on the official "
		"pmkisan.gov.in portal. We also have a 'Schemes' section in this app!",
	),
	(
		("rust", "yellow", "leaf", "disease", "fungus"),
		"Yellow rust is common in wheat. Symptoms include yellow stripes on leaves. Treatment: Spray Propiconazole "
		"(0.1%) immediately. Upload a photo in 'Crop Health' for a sure diagnosis.",
	),
	(
		("soil", "ph", "test", "acid", "alkaline"),
		"Ideal soil pH for most crops is 6.0 to 7.0. If your soil is too acidic, add lime. If too alkaline, add "
		"gypsum. Do you need help with a specific crop's soil needs?",
	),
	(
		("wheat", "gehu"),
		"Wheat needs cold weather for growth. Best sowing time is Nov 1 - Nov 15. Recommended varieties: PBW 343, "
		"HD 2967. Irrigation is critical at the crown root initiation stage (21 days after sowing).",
	),
	(
		("rice", "paddy", "dhan"),
		"Rice requires standing water. Beware of Blast disease and Stem Borers. Use nitrogen fertilizers in splits "
		"for best yield. Harvesting should be done when 80% grains turn golden.",
	),
	(
		("cotton", "kapas"),
		"Cotton is sensitive to waterlogging. Watch out for Bollworms. BT Cotton is resistant to some pests but "
		"still needs monitoring. Best soil: Black soil (Regur).",
	),
	(
		("fertilizer", "urea", "dap", "npk"),
		"Balanced fertilization is key. Don't overuse Urea as it makes plants succulent and prone to pests. Use NPK "
		"4:2:1 ratio for general cereals, or get a Soil Health Card for specific advice.",
	),
	(
		("organic", "natural", "compost"),
		"Organic farming improves long-term soil health. Start by using Vermicompost and Jeevamrut (cow dung & "
		"urine mixture). It reduces cost and improves water retention.",
	),
	(
		("irrigation", "water", "drip", "sprinkler"),
		"Drip irrigation saves 40-60% water and delivers fertilizer directly to roots (fertigation). Government "
		"subsidies differ by state but often cover 50-80% of the cost.",
	),
)

DEFAULT_HELP = "I can help with weather, prices, diseases, and schemes."


def get_smart_answer(text: str) -> str | None:
	"""First table entry with any keyword inside ``text`` (case-insensitive), else ``None``."""
	lowered = text.lower()
	for keywords, answer in SMART_ANSWERS:
		if any(keyword in lowered for keyword in keywords):
			return answer
	return None
