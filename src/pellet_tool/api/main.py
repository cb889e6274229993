import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from pellet_tool import __version__
from pellet_tool.engine import PricingEngine
from pellet_tool.geo import DEFAULT_CALIBRATION
from pellet_tool.api.quote_api import router as quote_router
from pellet_tool.api.state import get_engine, get_distance_service, get_email_service
from pellet_tool.services.distance_service import DistanceService
from pellet_tool.services.email_service import ContactForm, EmailService
from pellet_tool.services.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pellet Quote API",
    description="Product, packaging and delivery quotes for soil stabilization pellets",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include quote / LSD / distance API
app.include_router(quote_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Pellet Quote API Active"}


@app.post("/api/contact")
async def submit_contact(form: ContactForm, email: EmailService = Depends(get_email_service)):
    logger.info("Form submission received: %s request from %s (%s)", form.type, form.name, form.company)
    try:
        email.send_contact(form)
    except EmailDeliveryError as e:
        logger.error("Form submission error: %s", e)
        raise HTTPException(status_code=502, detail={"message": "Failed to send notification", "error": str(e)})
    return {"message": "Form submitted successfully"}


@app.get("/system/status")
async def get_status(
    engine: PricingEngine = Depends(get_engine),
    distance: DistanceService = Depends(get_distance_service),
    email: EmailService = Depends(get_email_service),
):
    return {
        "engine_active": True,
        "tiers": engine.tier_matcher.describe(),
        "ats_calibration": DEFAULT_CALIBRATION.name,
        "distance_configured": distance.configured,
        "email_configured": email.configured,
    }
