#!/usr/bin/env python3
"""Test OpenAI API connection and the configured coaching model."""

import sys
from pathlib import Path

from openai import OpenAI, OpenAIError

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from esports_coach.config import settings
from esports_coach.prompts import get_system_prompt
from esports_coach.verifier import CoachingVerifier

if not settings.OPENAI_API_KEY:
    print("OPENAI_API_KEY is not set; the booth will run in simulated mode.")
    sys.exit(1)

client = OpenAI(api_key=settings.OPENAI_API_KEY)

# Test 1: List available GPT models
print("=== Available GPT Models ===")
models = client.models.list()
gpt_models = [m.id for m in models.data if "gpt" in m.id.lower()]
for m in sorted(gpt_models):
    print(f"  {m}")

# Test 2: One coaching line per game category, run through the verifier
print(f"\n=== Testing Coaching Advice ({settings.OPENAI_MODEL}) ===")
for category in ["moba", "fighting", "sport"]:
    try:
        response = client.responses.create(
            model=settings.OPENAI_MODEL,
            instructions=get_system_prompt(category, "Smoke Test", "SmokeTest", "Gold"),
            input="Give one short coaching tip for the early game.",
        )
    except OpenAIError as e:
        print(f"  ✗ {category}: {str(e)[:60]}")
        continue
    verdict = CoachingVerifier(category).verify_advice(response.output_text)
    mark = "✓" if verdict.is_valid else "~"
    print(f"  {mark} {category} (conf={verdict.confidence:.2f}): {verdict.modified_advice}")
