# tariff_engine/api/lambda_handler.py
"""
AWS Lambda handler for FastAPI using Mangum (ASGI adapter).

How it works:
- API Gateway invokes Lambda
- Mangum translates the event into an ASGI request
- FastAPI handles routing (/health, /sectors, /quote, /scenarios)
- Response is returned back to API Gateway

The rating tables are module constants, so there is nothing to warm up
beyond importing the app.
"""

from __future__ import annotations

from mangum import Mangum

from tariff_engine.api.app import app


handler = Mangum(app, lifespan="off")
