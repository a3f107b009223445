"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send a single prompt to the Groq chat-completions API and return raw text.
- Classify provider failures (missing key, quota exhausted, other) so the
  recommendation pipeline can decide between fallback and failure.
"""
