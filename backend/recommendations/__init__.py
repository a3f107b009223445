"""
Neighborhood recommendation pipeline.

Responsibilities:
- Turn an assessment profile into a prompt for the LLM.
- Extract and validate the JSON array of neighborhoods from the model output.
- Fall back to the static per-city catalog when the model is saturated or its
  output is unusable, adjusting for children and a safety priority.
- Suggest candidate areas while the assessment is in progress.
"""
