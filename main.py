from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from linkcheck.api.routes import router
from linkcheck.core.config import APP_VERSION, settings
from linkcheck.core.logging import configure_logging

configure_logging()

app = FastAPI(title="Link Checker", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
