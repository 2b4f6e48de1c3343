"""
FastAPI routers for all API endpoints.

- recommendations: POST /api/recommend
- samples: GET /api/samples/{domain}
- health: GET /health
"""
