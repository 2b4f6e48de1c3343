"""
Quick demo script to run the recommendation API locally.

This script starts a local server and shows how to make requests to the endpoint.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Seed Recommender Backend Demo")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Recommend:     POST http://localhost:8000/api/recommend")
    print("   - Sample seeds:  GET  http://localhost:8000/api/samples/{songs|movies|tvshows}")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    print("Requires GEMINI_API_KEY in the environment or .env file.")
    print()
    print("Test with curl:")
    print('   curl -X POST "http://localhost:8000/api/recommend" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"domain": "songs", "seeds": [{"title": "Hotel California", "by": "Eagles"}], "count": 5}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "recommender.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
