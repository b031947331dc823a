"""
Application Layer for the workout structure editor.

This package contains:
- use_cases/: Workflows that orchestrate the domain services
"""
