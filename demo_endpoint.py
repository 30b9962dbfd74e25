"""
Quick demo script to try the /recommendation endpoint.

This script starts a local server and shows how to make requests to the endpoint.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Supplement Advisor Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:    GET  http://localhost:8000/health")
    print("   - Recommendation:  POST http://localhost:8000/recommendation")
    print("     (aliases: /health/recommend, /api/recommendation)")
    print("   - API Docs:             http://localhost:8000/docs")
    print("   - ReDoc:                http://localhost:8000/redoc")
    print()
    print("🧪 Mock mode:")
    print("   Set USE_MOCK_API=true (or leave GOOGLE_API_KEY unset) to get")
    print("   rule-based recommendations without calling the model.")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/recommendation" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"profile": {"age": 29, "gender": "male", "weight": 70, "smoking": false,')
    print('          "medications": "없음", "concerns": ["피로"], "lifestyle": ["수면"]}}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "supplement_advisor.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
