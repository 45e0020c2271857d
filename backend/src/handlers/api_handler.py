"""Main FastAPI application handler for Lambda deployment."""

import logging
import os
import time
from datetime import UTC, datetime

import boto3
from botocore.exceptions import ClientError
from fastapi import Depends, FastAPI, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from mangum import Mangum

from models.leaderboard import Timeframe
from models.prediction import PredictionRequest
from models.user import SignInRequest, SignUpRequest
from models.weather_report import WeatherReportRequest
from services.auth_service import AuthService
from services.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StateConflictError,
)
from services.leaderboard_service import DEFAULT_LIMIT, MAX_LIMIT, LeaderboardService
from services.prediction_service import PredictionService
from services.report_service import (
    DEFAULT_RADIUS_MILES,
    MAX_REPORTS_RETURNED,
    ReportService,
)
from services.user_service import UserService
from services.weather_service import WeatherService, placeholder_observation
from stores.base import PredictionStore, ReportStore, UserStore
from stores.memory import (
    InMemoryPredictionStore,
    InMemoryReportStore,
    InMemoryUserStore,
)
from stores.seed import seed_demo_data
from utils.cache import (
    CACHE_CONTROL_NO_STORE,
    CACHE_CONTROL_PRIVATE,
    CACHE_CONTROL_PUBLIC_SHORT,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(
    title="WeatherQuest API",
    description="Crowdsourced weather reports, nowcasts and leaderboards",
    version=API_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log slow requests and error responses with timing."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    path = request.url.path
    if duration_ms > 1000:
        logger.warning(
            "[SLOW] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[CLIENT_ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized stores and services
_dynamodb = None
_user_store = None
_report_store = None
_prediction_store = None
_auth_service = None
_user_service = None
_weather_service = None
_report_service = None
_prediction_service = None
_leaderboard_service = None

# Security scheme for bearer token authentication
security = HTTPBearer(auto_error=False)


def reset_services():
    """Reset all lazy-initialized stores and services. Useful for testing.

    Also resets boto3's default session so a DynamoDB backend created
    afterwards binds to the current mock context (e.g. moto's mock_aws).
    """
    global _dynamodb, _user_store, _report_store, _prediction_store
    global _auth_service, _user_service, _weather_service, _report_service
    global _prediction_service, _leaderboard_service
    _dynamodb = None
    _user_store = None
    _report_store = None
    _prediction_store = None
    _auth_service = None
    _user_service = None
    _weather_service = None
    _report_service = None
    _prediction_service = None
    _leaderboard_service = None
    boto3.DEFAULT_SESSION = None


def _storage_backend() -> str:
    return os.environ.get("STORAGE_BACKEND", "memory").lower()


def get_dynamodb():
    """Get or create DynamoDB resource."""
    global _dynamodb
    if _dynamodb is None:
        region = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
        _dynamodb = boto3.resource("dynamodb", region_name=region)
    return _dynamodb


def _init_stores():
    global _user_store, _report_store, _prediction_store
    if _storage_backend() == "dynamodb":
        # Imported here so the memory backend never needs AWS configuration
        from stores.dynamodb import (
            DynamoDBPredictionStore,
            DynamoDBReportStore,
            DynamoDBUserStore,
        )

        dynamodb = get_dynamodb()
        _user_store = DynamoDBUserStore(
            dynamodb.Table(os.environ.get("USERS_TABLE", "weatherquest-users-dev"))
        )
        _report_store = DynamoDBReportStore(
            dynamodb.Table(
                os.environ.get("WEATHER_REPORTS_TABLE", "weatherquest-reports-dev")
            )
        )
        _prediction_store = DynamoDBPredictionStore(
            dynamodb.Table(
                os.environ.get("PREDICTIONS_TABLE", "weatherquest-predictions-dev")
            )
        )
    else:
        _user_store = InMemoryUserStore()
        _report_store = InMemoryReportStore()
        _prediction_store = InMemoryPredictionStore()

    if os.environ.get("SEED_DEMO_DATA", "false").lower() == "true":
        seed_demo_data(_user_store, _report_store)


def get_user_store() -> UserStore:
    if _user_store is None:
        _init_stores()
    return _user_store


def get_report_store() -> ReportStore:
    if _report_store is None:
        _init_stores()
    return _report_store


def get_prediction_store() -> PredictionStore:
    if _prediction_store is None:
        _init_stores()
    return _prediction_store


def get_auth_service():
    """Get or create AuthService."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(
            user_store=get_user_store(),
            jwt_secret=os.environ.get("JWT_SECRET_KEY"),
        )
    return _auth_service


def get_user_service():
    """Get or create UserService."""
    global _user_service
    if _user_service is None:
        _user_service = UserService(get_user_store())
    return _user_service


def get_weather_service():
    """Get or create WeatherService."""
    global _weather_service
    if _weather_service is None:
        _weather_service = WeatherService()
    return _weather_service


def get_report_service():
    """Get or create ReportService."""
    global _report_service
    if _report_service is None:
        _report_service = ReportService(
            report_store=get_report_store(),
            user_service=get_user_service(),
        )
    return _report_service


def get_prediction_service():
    """Get or create PredictionService."""
    global _prediction_service
    if _prediction_service is None:
        _prediction_service = PredictionService(
            prediction_store=get_prediction_store(),
            user_service=get_user_service(),
            weather_service=get_weather_service(),
        )
    return _prediction_service


def get_leaderboard_service():
    """Get or create LeaderboardService."""
    global _leaderboard_service
    if _leaderboard_service is None:
        _leaderboard_service = LeaderboardService(
            user_store=get_user_store(),
            report_store=get_report_store(),
            prediction_store=get_prediction_store(),
        )
    return _leaderboard_service


# MARK: - Authentication Dependency


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
) -> str:
    """Extract user ID from JWT token.

    Raises:
        HTTPException: If token is missing or invalid
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return get_auth_service().verify_access_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


# MARK: - Health Check


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": API_VERSION,
        "storage": _storage_backend(),
    }


# MARK: - Auth Endpoints


@app.post("/api/v1/auth/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest):
    """Create an account. The password and its hash are never returned."""
    try:
        user = get_auth_service().sign_up(
            email=request.email, username=request.username, password=request.password
        )
        return {"message": "Account created successfully", "user": user.model_dump()}

    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Sign up error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account",
        )


@app.post("/api/v1/auth/signin")
async def sign_in(request: SignInRequest):
    """Sign in with email and password and refresh the daily streak."""
    try:
        result = get_auth_service().sign_in(request.email, request.password)
        return result.to_dict()

    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Sign in error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to sign in",
        )


@app.get("/api/v1/auth/me")
async def get_current_user(
    response: Response, user_id: str = Depends(get_current_user_id)
):
    """Get the authenticated user's public profile."""
    try:
        user = get_user_service().get_user(user_id)
        response.headers["Cache-Control"] = CACHE_CONTROL_PRIVATE
        return {"user": user.to_public().model_dump()}

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error("Get current user error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get user info",
        )


# MARK: - Weather Endpoints


@app.get("/api/v1/weather/current")
def get_current_weather(
    response: Response,
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
):
    """Current conditions for a coordinate.

    Always answers 200: when no live provider responds the body is a
    placeholder observation with ``is_mock_data`` set.
    Declared sync so the blocking provider calls run in the threadpool.
    """
    try:
        observation = get_weather_service().get_current_observation(lat, lon)
    except Exception as e:
        # The chain already swallows provider failures; this guards the rest
        logger.error("Weather resolution error: %s", e, exc_info=True)
        observation = placeholder_observation(api_error=True)

    response.headers["Cache-Control"] = CACHE_CONTROL_NO_STORE
    return observation.model_dump()


@app.get("/api/v1/weather/reports")
async def get_weather_reports(
    lat: float = Query(..., ge=-90, le=90, description="Center latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Center longitude"),
    radius: float = Query(
        DEFAULT_RADIUS_MILES, ge=0, le=12500, description="Search radius in miles"
    ),
):
    """Most recent reports near a point (at most 20), newest first."""
    try:
        reports = get_report_service().get_nearby_reports(
            lat, lon, radius_miles=radius, limit=MAX_REPORTS_RETURNED
        )
        return {
            "reports": [r.model_dump() for r in reports],
            "count": len(reports),
            "radius": radius,
        }

    except Exception as e:
        logger.error("Error fetching reports: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch weather reports",
        )


@app.post("/api/v1/weather/reports", status_code=status.HTTP_201_CREATED)
async def submit_weather_report(
    request: WeatherReportRequest,
    user_id: str = Depends(get_current_user_id),
):
    """Submit a weather report and earn XP."""
    try:
        report, user = get_report_service().submit_report(user_id, request)
        return {
            "report": report.model_dump(),
            "user": {
                "total_xp": user.total_xp,
                "level": user.level,
                "reports_count": user.reports_count,
            },
        }

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Error creating report: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create weather report",
        )


# MARK: - Prediction Endpoints


@app.post("/api/v1/predictions", status_code=status.HTTP_201_CREATED)
async def submit_prediction(
    request: PredictionRequest,
    user_id: str = Depends(get_current_user_id),
):
    """Submit a nowcast for the next 15, 30 or 60 minutes."""
    try:
        prediction, user = get_prediction_service().submit_prediction(user_id, request)
        return {
            "prediction": prediction.model_dump(),
            "user": {
                "total_xp": user.total_xp,
                "level": user.level,
                "predictions_count": user.predictions_count,
            },
        }

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Error creating prediction: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create prediction",
        )


@app.post("/api/v1/predictions/{prediction_id}/verify")
def verify_prediction(
    prediction_id: str, user_id: str = Depends(get_current_user_id)
):
    """Check a due nowcast against current live conditions."""
    try:
        prediction = get_prediction_service().verify_prediction(prediction_id, user_id)
        return {"prediction": prediction.model_dump()}

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except StateConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error("Error verifying prediction: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify prediction",
        )


# MARK: - Leaderboard


@app.get("/api/v1/leaderboard")
async def get_leaderboard(
    response: Response,
    timeframe: str = Query("weekly", description="daily, weekly or alltime"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
):
    """Users ranked by XP for the selected timeframe."""
    try:
        selected = Timeframe.parse(timeframe)
        entries = get_leaderboard_service().get_leaderboard(selected, limit=limit)
        response.headers["Cache-Control"] = CACHE_CONTROL_PUBLIC_SHORT
        return {
            "timeframe": selected.value,
            "entries": [e.model_dump() for e in entries],
            "last_updated": datetime.now(UTC).isoformat(),
        }

    except Exception as e:
        logger.error("Leaderboard error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch leaderboard",
        )


# MARK: - Error Handlers


@app.exception_handler(ClientError)
async def aws_client_error_handler(request, exc: ClientError):
    """Handle AWS client errors without leaking details."""
    logger.error("AWS error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage error"},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle value errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request, exc: Exception):
    """Last-resort handler so every request gets a structured response."""
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# MARK: - Lambda Handler

api_handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
