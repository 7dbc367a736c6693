import os
from typing import Dict
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from semantic_metrics.api import semantics
from semantic_metrics.core.errors import AnalysisError

load_dotenv()


app = FastAPI(
    title="Semantic Metrics API",
    description="Grammatical correctness, lexical richness and quality metrics "
    "for Spanish educational resources.",
    version="1.0.0",
)

origins = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AnalysisError, semantics.analysis_error_handler)

app.include_router(semantics.router)


@app.get("/")
def read_root() -> Dict[str, str]:
    """Root endpoint to check API status.

    Returns:
        Dict[str, str]: Status message and link to docs.
    """
    return {"status": "API is ready", "docs": "/docs"}
