"""Prompt construction for nutrition analysis."""

from food_catalog.domain.analysis import SearchType
from food_catalog.domain.health_profile import HealthProfile

_BASE_PROMPT = """You are a friendly nutrition expert. Analyze this food item: "{query}" ({search_type})

Write your analysis in SIMPLE, EASY-TO-UNDERSTAND language that any normal person can read and understand. Avoid technical jargon and medical terms. Use everyday words.

Return ONLY a valid JSON object. Do NOT wrap it in markdown code blocks and do NOT add any text before or after the JSON. Start your response with {{ and end with }}.

Required JSON format:
{{
  "healthImpact": "positive|negative|neutral|caution",
  "score": 0-100,
  "analysis": "A friendly, conversational explanation (2-3 sentences) of what this food is and how it affects your health.",
  "recommendations": ["Simple, practical advice like 'Eat in small portions'"],
  "warnings": ["Simple warnings like 'High in sugar' or 'Contains allergens'"],
  "benefits": ["Simple benefits like 'Good for your heart' or 'Helps with energy'"],
  "nutritionalFacts": {{
    "calories": "Simple explanation like 'About 100 calories per serving'",
    "macros": "Simple breakdown like 'Mostly carbs with some protein'",
    "keyNutrients": ["Simple nutrients like 'Vitamin C', 'Fiber', 'Iron'"]
  }},
  "simpleSummary": "One sentence summary that anyone can understand"
}}

IMPORTANT:
- Use simple words like "good for you" instead of "beneficial"
- Use "bad for you" instead of "detrimental"
- Use "energy" instead of "calories" when talking to users
- Use "sugar" instead of "glucose"
- Use "salt" instead of "sodium"
- Make it sound like you're talking to a friend, not a doctor
- The "analysis" field should be a clean, readable paragraph (2-3 sentences)
- The JSON must be valid and parseable"""

_PERSONALIZATION_HEADER = """PERSONALIZED HEALTH CONTEXT:

Consider this user's specific health situation when analyzing the food. Make your recommendations personal and relevant to their health needs."""

_PERSONALIZATION_INSTRUCTIONS = """PERSONALIZATION INSTRUCTIONS:
- Consider their specific health conditions when giving advice
- Mention any relevant warnings based on their conditions
- Adjust recommendations based on their dietary restrictions
- Consider their health goals when scoring the food
- Be extra careful with allergen warnings if they have food allergies
- Give specific advice for their diabetes/blood pressure/heart health if applicable
- Make the analysis feel personal and relevant to their situation"""

_RESTRICTION_LABELS = (
    ("vegetarian", "Vegetarian"),
    ("vegan", "Vegan"),
    ("keto", "Keto"),
    ("paleo", "Paleo"),
    ("low_carb", "Low Carb"),
    ("low_sodium", "Low Sodium"),
    ("low_sugar", "Low Sugar"),
    ("gluten_free", "Gluten Free"),
    ("dairy_free", "Dairy Free"),
)


def build_analysis_prompt(
    search_query: str, search_type: SearchType, profile: HealthProfile | None
) -> str:
    """Build the model prompt for a search, with optional health context."""
    prompt = _BASE_PROMPT.format(query=search_query, search_type=search_type.value)
    if profile is None:
        return prompt

    sections = [
        _section("HEALTH CONDITIONS", _condition_lines(profile)),
        _section("FOOD ALLERGIES", _allergy_lines(profile)),
        _inline_section("DIETARY RESTRICTIONS", _restriction_labels(profile)),
        _section("HEALTH GOALS", _goal_lines(profile)),
        _section("CURRENT MEDICATIONS", _medication_lines(profile)),
    ]
    parts = [prompt, _PERSONALIZATION_HEADER]
    parts.extend(section for section in sections if section)
    parts.append(_PERSONALIZATION_INSTRUCTIONS)
    return "\n\n".join(parts)


def _section(title: str, lines: list[str]) -> str | None:
    if not lines:
        return None
    return "\n".join([f"{title}:", *(f"- {line}" for line in lines)])


def _inline_section(title: str, labels: list[str]) -> str | None:
    if not labels:
        return None
    return f"{title}: {', '.join(labels)}"


def _condition_lines(profile: HealthProfile) -> list[str]:
    conditions = profile.health_conditions
    if conditions is None:
        return []
    lines: list[str] = []
    diabetes = conditions.diabetes
    if diabetes and diabetes.type:
        lines.append(
            f"Diabetes ({diabetes.type}): {_or_unknown(diabetes.severity)} severity"
        )
    hypertension = conditions.hypertension
    if hypertension and hypertension.severity:
        lines.append(f"High Blood Pressure: {hypertension.severity} severity")
    heart = conditions.heart_disease
    if heart and heart.type:
        lines.append(
            f"Heart Disease: {heart.type} ({_or_unknown(heart.severity)} severity)"
        )
    kidney = conditions.kidney_disease
    if kidney and kidney.stage:
        lines.append(f"Kidney Disease: Stage {kidney.stage}")
    digestive = conditions.digestive_issues
    if digestive:
        issues = [
            label
            for flag, label in (
                (digestive.ibs, "IBS"),
                (digestive.crohns, "Crohn's Disease"),
                (digestive.colitis, "Colitis"),
                (digestive.celiac, "Celiac Disease"),
                (digestive.lactose_intolerant, "Lactose Intolerant"),
            )
            if flag
        ]
        if issues:
            lines.append(f"Digestive Issues: {', '.join(issues)}")
    return lines


def _allergy_lines(profile: HealthProfile) -> list[str]:
    if profile.allergies is None:
        return []
    return [
        f"{allergy.allergen}: {_or_unknown(allergy.severity)} reaction "
        f"({_or_unknown(allergy.reaction)})"
        for allergy in profile.allergies.food
    ]


def _restriction_labels(profile: HealthProfile) -> list[str]:
    restrictions = profile.dietary_restrictions
    if restrictions is None:
        return []
    labels = [
        label for attr, label in _RESTRICTION_LABELS if getattr(restrictions, attr)
    ]
    religious = restrictions.religious
    if religious:
        labels.extend(
            label
            for flag, label in (
                (religious.halal, "Halal"),
                (religious.kosher, "Kosher"),
                (religious.hindu, "Hindu"),
            )
            if flag
        )
    return labels


def _goal_lines(profile: HealthProfile) -> list[str]:
    goals = profile.health_goals
    if goals is None:
        return []
    lines: list[str] = []
    weight = goals.weight_management
    if weight and weight.goal:
        lines.append(
            f"Weight Goal: {weight.goal} weight "
            f"(Current: {_or_unknown(weight.current_weight)}lbs, "
            f"Target: {_or_unknown(weight.target_weight)}lbs)"
        )
    sugar = goals.blood_sugar
    if sugar and sugar.goal:
        lines.append(
            f"Blood Sugar: {sugar.goal} "
            f"(Current A1C: {_or_unknown(sugar.current_hba1c)}%, "
            f"Target: {_or_unknown(sugar.target_hba1c)}%)"
        )
    pressure = goals.blood_pressure
    if pressure and pressure.goal:
        lines.append(
            f"Blood Pressure: {pressure.goal} "
            f"(Target: {_or_unknown(pressure.target_systolic)}/"
            f"{_or_unknown(pressure.target_diastolic)})"
        )
    return lines


def _medication_lines(profile: HealthProfile) -> list[str]:
    return [
        f"{med.name} ({_or_unknown(med.dosage)}): For {_or_unknown(med.purpose)}"
        for med in profile.medications
    ]


def _or_unknown(value: object) -> str:
    return "unknown" if value is None else str(value)
