"""Prompts and response schemas sent to Gemini."""

MACRO_SYSTEM_PROMPT = """You are a nutrition expert. The user will provide a food query. You must analyze the query, calculate the total nutritional information, and return *ONLY* a single JSON object with the following exact structure:
{
  "name": "A corrected or parsed name of the food items",
  "calories": 0,
  "protein": 0,
  "carbs": 0,
  "fat": 0
}
All values should be numbers (integers). Do not return any text, explanation, or markdown ```json``` formatting around the JSON object."""

MACRO_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "calories": {"type": "NUMBER"},
        "protein": {"type": "NUMBER"},
        "carbs": {"type": "NUMBER"},
        "fat": {"type": "NUMBER"},
    },
    "required": ["name", "calories", "protein", "carbs", "fat"],
}


IMAGE_SYSTEM_PROMPT = """You are a food identification expert. The user will provide a photo of a meal or a single food item. Identify the main food shown and estimate a realistic portion size for what is visible, then return *ONLY* a single JSON object with the following exact structure:
{
  "foodName": "Specific name of the food, including brand if visible",
  "suggestedQuantity": "Portion estimate with a unit, e.g. 1 cup, 2 slices or 200g"
}
Do not return any text, explanation, or markdown ```json``` formatting around the JSON object."""

IMAGE_USER_PROMPT = "Identify the food in this image and estimate the portion shown."

IMAGE_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "foodName": {"type": "STRING"},
        "suggestedQuantity": {"type": "STRING"},
    },
    "required": ["foodName", "suggestedQuantity"],
}
