#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the text-generation backend is reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.services.llm_client import get_llm_client


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB BOARD AI ASSISTANT - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking text-generation backend...")
    print(f"    Base URL: {settings.llm_base_url}")
    print(f"    Model: {settings.llm_model}")
    client = get_llm_client()
    if client.test_connection():
        print("    ✅ AI backend: CONNECTED")
    else:
        print("    ❌ AI backend: FAILED")
        print(f"    Is it running? For Ollama: ollama serve && ollama pull {settings.llm_model}")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
