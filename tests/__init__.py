# Inventra Test Suite
#
# This package contains:
# - client/: API client, schemas, cart, checkout and receipt tests (pytest)
# - pages/: page tests through Flask's test client against a fake backend
# - stress/: load tests (Locust) against a running frontend
#
# Run with: python -m pytest
