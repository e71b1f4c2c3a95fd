NODE_PROMPT = """You are an expert tutor who breaks any subject (mathematics, chess, coffee, programming, ...) into a skill tree.

The learner wants to study: "{name}"
{context}
Produce a single JSON object describing this topic with:
1. The topic name ("name").
2. Its immediate sub-topics or prerequisite concepts ("children"), at most {max_children}.
3. Exactly {practice_items} practice problems, worked examples or key points with explanations ("practiceItems").
4. 2-3 relevant video tutorials or resource links ("videoTutorials").

The JSON must follow this schema exactly:
{{
  "name": "Topic Name",
  "children": [
    {{"name": "Sub-topic 1"}},
    {{"name": "Sub-topic 2"}}
  ],
  "practiceItems": [
    {{"q": "Question, example or key point", "s": "Solution, explanation or detail"}}
  ],
  "videoTutorials": [
    {{"title": "Video or resource title", "url": "https://www.example.com/..."}}
  ]
}}

Rules:
- Enclose every property name and string value in double quotes and escape quotes inside strings.
- Use plain text for mathematics; no backslashes except valid JSON escapes.
- No trailing commas.
- Respond with the JSON object only. No prose and no markdown fences before or after it."""


CONTENT_PROMPT = """You are an expert tutor.

Topic: "{name}"
{context}
Produce a single JSON object with:
1. Exactly {practice_items} practice problems, worked examples or key points with explanations ("practiceItems").
2. 2-3 relevant video tutorials or resource links ("videoTutorials").

The JSON must follow this schema exactly:
{{
  "practiceItems": [
    {{"q": "Question, example or key point", "s": "Solution, explanation or detail"}}
  ],
  "videoTutorials": [
    {{"title": "Video or resource title", "url": "https://www.example.com/..."}}
  ]
}}

Rules:
- Enclose every property name and string value in double quotes and escape quotes inside strings.
- No trailing commas.
- Respond with the JSON object only. No prose and no markdown fences before or after it."""


def render_context(ancestors: list[str]) -> str:
    """Describe where a topic sits in the tree, or return an empty string."""
    if not ancestors:
        return ""
    path = " > ".join(ancestors)
    return f'It is a sub-topic within: "{path}". Keep the answer focused on that context.\n'
