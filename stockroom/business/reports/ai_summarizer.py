"""
AI report summarization

Talks to a Together.ai compatible completion endpoint. The summarizer is an
optional collaborator: every failure surfaces as SummarizerError so callers
can fall back to the deterministic analysis.
"""

from __future__ import annotations

import json
from typing import Optional, Protocol

import httpx

from stockroom.logger import get_logger

logger = get_logger("stockroom.business.reports.ai_summarizer")

BASE_PROMPT = (
    "You are a business analytics AI. Analyze the following data and provide insights "
    "in JSON format. Keep the response focused and professional."
)

_SALES_SHAPE = """{{
  "summary": "Brief summary of {period} performance",
  "totalSales": number,
  "averageDailySales": number,
  "trend": "upward/downward/stable",
  "prediction": {{
    "nextPeriod": number,
    "confidence": "high/medium/low"
  }},
  "recommendations": ["actionable recommendation 1", "actionable recommendation 2"]
}}"""

RESPONSE_SHAPES = {
    'weekly-sales': ('Weekly Sales Data', _SALES_SHAPE.format(period='weekly sales')),
    'monthly-sales': ('Monthly Sales Data', _SALES_SHAPE.format(period='monthly')),
    'sales-trends': ('Sales Trend Data', """{
  "summary": "Brief summary of sales trends",
  "trend": {
    "direction": "upward/downward/stable",
    "percentageChange": number,
    "confidence": "high/medium/low"
  },
  "patterns": ["observed pattern 1", "observed pattern 2"],
  "recommendations": ["actionable recommendation 1", "actionable recommendation 2"]
}"""),
    'reorder-suggestions': ('Inventory Data', """{
  "summary": "Brief summary of inventory status",
  "criticalItems": [
    {
      "product": "product name",
      "currentStock": number,
      "reorderAmount": number,
      "priority": "high/medium/low"
    }
  ],
  "recommendations": ["actionable recommendation 1", "actionable recommendation 2"]
}"""),
    'product-performance': ('Product Performance Data', """{
  "summary": "Brief summary of product performance",
  "topPerformers": [
    {
      "product": "product name",
      "performance": "description",
      "recommendation": "specific action"
    }
  ],
  "recommendations": ["actionable recommendation 1", "actionable recommendation 2"]
}"""),
    'sales-prediction': ('Product Sales History (units sold per day)', """{
  "summary": "Brief summary of the product's sales outlook",
  "weeklyPrediction": number,
  "monthlyPrediction": number,
  "trend": "increasing/decreasing/stable",
  "reorderRecommendation": {
    "shouldReorder": true/false,
    "recommendedQuantity": number,
    "reason": "why"
  },
  "insights": ["insight 1", "insight 2"]
}"""),
}

REQUIRED_FIELDS = {
    'weekly-sales': ('summary', 'totalSales', 'prediction'),
    'monthly-sales': ('summary', 'totalSales', 'prediction'),
    'sales-trends': ('summary', 'trend', 'recommendations'),
    'reorder-suggestions': ('summary', 'criticalItems'),
    'product-performance': ('summary', 'topPerformers'),
    'sales-prediction': ('summary', 'weeklyPrediction', 'monthlyPrediction', 'trend'),
}


class SummarizerError(Exception):
    """The AI service could not produce a completion"""


class Summarizer(Protocol):
    def complete(self, prompt: str) -> str:
        ...


def build_prompt(kind: str, data) -> str:
    if kind not in RESPONSE_SHAPES:
        return BASE_PROMPT
    title, shape = RESPONSE_SHAPES[kind]
    return (
        f"{BASE_PROMPT}\n{title}:\n{json.dumps(data, indent=2, default=str)}\n\n"
        f"Provide a JSON response with:\n{shape}"
    )


def parse_ai_response(text: str, kind: str) -> Optional[dict]:
    """Return the parsed analysis, or None if it is not JSON with the required fields"""
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        logger.warning(f"AI response for {kind} is not valid JSON")
        return None
    if not isinstance(parsed, dict):
        return None
    missing = [f for f in REQUIRED_FIELDS.get(kind, ('summary',)) if f not in parsed]
    if missing:
        logger.warning(f"AI response for {kind} missing fields: {missing}")
        return None
    return parsed


class TogetherSummarizer:
    """Completion client with a hard request timeout"""

    def __init__(self, api_key: str, api_url: str, model: str,
                 timeout: float = 10.0, transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config) -> Optional['TogetherSummarizer']:
        """None when no API key is configured"""
        api_key = config.get('TOGETHER_API_KEY')
        if not api_key:
            return None
        return cls(
            api_key=api_key,
            api_url=config.get('AI_API_URL'),
            model=config.get('AI_MODEL'),
            timeout=float(config.get('AI_TIMEOUT_SECONDS', 10)),
            transport=config.get('AI_TRANSPORT'),
        )

    def complete(self, prompt: str) -> str:
        body = {
            'model': self.model,
            'prompt': prompt,
            'max_tokens': 1024,
            'temperature': 0.7,
            'top_p': 0.7,
            'top_k': 50,
            'repetition_penalty': 1,
            'stop': ['</s>', 'Human:', 'Assistant:'],
        }
        headers = {'Authorization': f'Bearer {self.api_key}'}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.api_url, json=body, headers=headers)
                response.raise_for_status()
                payload = response.json()
            return payload['output']['choices'][0]['text'].strip()
        except httpx.TimeoutException as e:
            logger.warning(f"AI request timed out after {self.timeout}s")
            raise SummarizerError('AI request timed out') from e
        except httpx.HTTPError as e:
            logger.warning(f"AI request failed: {e}")
            raise SummarizerError(f'AI request failed: {e}') from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Unexpected AI response shape: {e}")
            raise SummarizerError('Unexpected AI response shape') from e
