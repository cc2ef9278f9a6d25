#!/usr/bin/env python3
"""Basic test script to verify the glossary service functionality."""

import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from glossary_search.config import Settings
from glossary_search.services import GlossaryService
from glossary_search.storage import Database, GlossaryRepository


def test_basic_functionality():
    """Test basic glossary service functionality."""
    print("🚀 Testing Glossary Search Service")
    print("=" * 50)

    # Initialize an in-memory store
    settings = Settings(_env_file=None, database_url="sqlite:///:memory:", anthropic_api_key=None)
    database = Database(settings.database_url)
    database.initialize()
    service = GlossaryService(GlossaryRepository(database), settings)

    # Load sample data
    sample_terms = [
        ("Tech", "API", "Application Programming Interface", None),
        ("Tech", "API Gateway", "Entry point that routes API calls", None),
        ("Tech", "CI/CD", "Continuous Integration and Continuous Delivery", None),
        ("Business", "ROI", "Return on Investment", "accounting"),
        ("Business", "QRS", "Quarterly Revenue Summary", None),
        ("Tech", "QRS", "Quick Response System", None),
    ]

    print("📊 Loading sample terms...")
    service.create_dictionary("Tech", "Technical terms")
    service.create_dictionary("Business", "Business terms")
    for dictionary, term, definition, context in sample_terms:
        service.add_term(dictionary, term, definition, context)
    print(f"✅ Loaded {len(sample_terms)} terms")

    # Lookup cases
    test_cases = [
        ("API", "Exact lookup"),
        ("  api  ", "Whitespace and case"),
        ("QRS", "Term in two dictionaries"),
        ("API Gatway", "Typo"),
        ("xyz123", "No match"),
    ]

    print("\n🔍 Running lookups...")
    print("-" * 50)

    for query, description in test_cases:
        print(f"\nQuery: '{query}' ({description})")
        found = service.get_term(query)

        if found:
            for i, term in enumerate(found, 1):
                print(f"  📋 Result {i}:")
                print(f"     Term: {term.term}")
                print(f"     Dictionary: {term.dictionary.name}")
                print(f"     Definitions: {[d.definition for d in term.definitions]}")
        else:
            print("  ❌ No results found")
            suggestions = service.suggest_terms(query)
            if suggestions:
                print(f"  💡 Suggestions: {suggestions}")

    # Text scanning
    print("\n🔄 Testing text scanning...")
    print("-" * 50)

    text = "The API Gateway improved ROI and the QRS report"
    for match in service.scan_text(text):
        print(f"'{match.term}' at {match.position} ({match.dictionary})")

    print(f"Markdown: {service.highlight_text(text)}")
    print(f"HTML: {service.highlight_text('ROI', 'html')}")

    # Advanced search
    print("\n🔗 Testing advanced search...")
    print("-" * 50)

    for term in service.advanced_search("api", {"match_type": "fuzzy"}):
        print(f"Fuzzy 'api': {term.term} (score {term.score})")

    for term in service.advanced_search("accounting", {"search_in": ["context"]}):
        print(f"Context 'accounting': {term.term}")

    # Get statistics
    print("\n📈 Service Statistics...")
    print("-" * 50)
    stats = service.get_stats()
    print(f"Total queries: {stats['total_queries']}")
    print(f"Term lookups: {stats['term_lookups']}")
    print(f"Searches: {stats['searches']}")
    print(f"Text scans: {stats['text_scans']}")
    print(f"No match rate: {stats['no_match_rate']:.2f}")
    print(f"Average execution time: {stats['average_execution_time_ms']:.2f}ms")

    database.close()
    print("\n✅ All tests completed successfully!")
    return True


if __name__ == "__main__":
    try:
        test_basic_functionality()
    except Exception as e:
        print(f"\n❌ Test failed with error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
