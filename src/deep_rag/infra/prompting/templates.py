from __future__ import annotations

DECOMPOSITION_TEMPLATE = """\
You are a query decomposition expert. Your task is to break down complex questions into \
simpler sub-queries that will help retrieve more comprehensive information from a knowledge base.

Original Question: "{query}"

Analyze this question and generate {max_sub_queries} different search queries that together \
will help answer the original question comprehensively.

Consider:
1. Different aspects or components of the question
2. Related concepts that might be needed for context
3. Prerequisites or background information
4. Specific details vs broad context
5. Different phrasings that might match documents better

Return your response in this exact JSON format:
{{
  "reasoning": "Brief explanation of why you chose these sub-queries",
  "subQueries": [
    "first search query",
    "second search query",
    "etc..."
  ]
}}

Only return valid JSON, no other text.
"""

EXPANSION_TEMPLATE = """\
Generate {count} alternative phrasings for this search query that might match different documents:

Query: "{query}"

Return as JSON array of strings only: ["phrase1", "phrase2", "phrase3"]
"""
