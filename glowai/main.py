import logging
from functools import lru_cache
from io import BytesIO
from typing import Dict, List, Optional

from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from fastapi import FastAPI, Request, HTTPException, Form, File, UploadFile, Depends
from fastapi.responses import JSONResponse

from PIL import Image, UnidentifiedImageError
import pillow_heif

from glowai import config
from glowai.ai.AiServices import AnalysisUnavailableError, analyze_skin, get_default_extractor
from glowai.ai.MetricExtractor import MetricExtractor
from glowai.ai.ProductRecommendation import ProductRecommendationService, product_service
from glowai.models.Product import Product, ProductCategory, ProductRecommendation
from glowai.models.Profile import UserProfile
from glowai.models.Request import CategoryRecommendationRequest, ImageReference, RecommendationRequest
from glowai.models.Response import SkinAnalysisResult

# HEIC/HEIF support for iPhone selfies
pillow_heif.register_heif_opener()

app = FastAPI(
    title="Glow AI",
    description="Skin analysis and product recommendation engine",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    error_details = [
        {
            "field": ".".join(str(loc_part) for loc_part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": error_details,
            "error": "Validation Error",
            "path": request.url.path,
        }
    )


logger = logging.getLogger('uvicorn')


@lru_cache
def get_metric_extractor() -> MetricExtractor:
    return get_default_extractor()


def get_product_service() -> ProductRecommendationService:
    return product_service


def get_user_profile(profile: Optional[str] = Form(None)) -> Optional[UserProfile]:
    if not profile:
        return None
    try:
        return UserProfile.model_validate_json(profile)
    except ValidationError as e:
        logger.error(f"Invalid profile in form data: {e}")
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Invalid profile: {e}")


HEIF_TYPES = ("image/heic", "image/heif", "application/octet-stream")


async def process_image(image: UploadFile) -> ImageReference:
    """Reads the upload, converting HEIC/HEIF selfies to JPEG."""
    image_data = await image.read()
    if not image_data:
        raise HTTPException(status_code=400, detail="An image is required.")

    content_type = image.content_type or "application/octet-stream"
    filename = image.filename or "image"

    if content_type in HEIF_TYPES or filename.lower().endswith(('.heic', '.heif')):
        try:
            pil_image = Image.open(BytesIO(image_data))

            if pil_image.mode in ("RGBA", "LA", "P"):
                pil_image = pil_image.convert("RGB")

            jpeg_buffer = BytesIO()
            pil_image.save(jpeg_buffer, format="JPEG", quality=95)

            image_data = jpeg_buffer.getvalue()
            content_type = "image/jpeg"
            filename = filename.rsplit('.', 1)[0] + '.jpg'

            logger.info(f"HEIC image converted to JPEG: {filename}")
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Could not convert HEIC image: {e}")
            raise HTTPException(status_code=400, detail=f"Could not read image: {e}")

    return ImageReference(uri=filename, data=image_data, media_type=content_type)


@app.post('/analyze', summary='Creates a new skin analysis', response_model=SkinAnalysisResult)
async def get_analysis(
        image: UploadFile = File(...),
        profile: Optional[UserProfile] = Depends(get_user_profile),
        extractor: MetricExtractor = Depends(get_metric_extractor),
):
    image_ref = await process_image(image)
    try:
        return await analyze_skin(image_ref, profile, extractor=extractor)
    except AnalysisUnavailableError as e:
        logger.error(f"Analysis unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@app.post('/recommendations', summary='Ranks the catalog for the user', response_model=List[ProductRecommendation])
def get_recommendations(
        body: RecommendationRequest,
        service: ProductRecommendationService = Depends(get_product_service),
):
    return service.get_recommendations(body.concerns, body.profile, body.analysis, body.limit)


@app.post('/recommendations/routine', summary='Ranks products for every routine step',
          response_model=Dict[ProductCategory, List[ProductRecommendation]])
def get_routine_recommendations(
        body: CategoryRecommendationRequest,
        service: ProductRecommendationService = Depends(get_product_service),
):
    return service.get_routine_recommendations(body.concerns, body.profile, body.analysis)


@app.post('/recommendations/category/{category}', summary='Ranks one product category',
          response_model=List[ProductRecommendation])
def get_category_recommendations(
        category: ProductCategory,
        body: CategoryRecommendationRequest,
        service: ProductRecommendationService = Depends(get_product_service),
):
    return service.get_recommendations_by_category(category, body.concerns, body.profile, body.analysis)


@app.get('/products', response_model=List[Product])
def list_products(
        category: Optional[ProductCategory] = None,
        service: ProductRecommendationService = Depends(get_product_service),
):
    return service.list_products(category)


@app.get('/products/{product_id}', response_model=Product)
def get_product(
        product_id: str,
        service: ProductRecommendationService = Depends(get_product_service),
):
    product = service.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
    return product
