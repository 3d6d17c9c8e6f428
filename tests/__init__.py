"""
Test suite for the AI Opportunity Map

- Row classification and matrix building
- Score normalisation and colour scale
- Tooltip interaction state machine
- Load state, generations and the CSV row source
- CLI and dashboard helpers
"""
