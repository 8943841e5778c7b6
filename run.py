#!/usr/bin/env python3
"""Simple script to run the Flask application."""
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)

from hoops_draft.api.app import create_app

if __name__ == '__main__':
    app = create_app()
    print("=" * 60)
    print("Hoops Draft")
    print("=" * 60)
    print("\nStarting server on http://localhost:5001")
    print("Press Ctrl+C to stop\n")
    app.run(debug=True, port=5001)
