from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from api.schemas import FrameRequest, StatusResponse
from api.services.session import DetectionService
from repcount.quality.failures import DetectorStateError

router = APIRouter(prefix="/session", tags=["session"])


def get_service(request: Request) -> DetectionService:
    return request.app.state.detection


@router.get("/status", response_model=StatusResponse)
async def get_status(service: DetectionService = Depends(get_service)) -> StatusResponse:
    return StatusResponse.from_status(service.detector.status)


@router.post("/frames", response_model=StatusResponse)
async def submit_frame(
    frame: FrameRequest,
    service: DetectionService = Depends(get_service),
) -> StatusResponse:
    """
    Publish the latest pose and evaluate one frame. Frames posted before
    detection starts only feed calibration. A running session keeps to the
    clock its first frame chose; switching answers 409.
    """
    try:
        service.check_clock(frame.timestamp)
    except DetectorStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    service.source.push(frame.to_pose())
    return StatusResponse.from_status(service.detector.process_frame(now=frame.timestamp))


@router.post("/start", response_model=StatusResponse)
async def start_detection(service: DetectionService = Depends(get_service)) -> StatusResponse:
    """
    Run the countdown and calibrate against the poses being posted meanwhile.
    Calibration failure is reported in the status message, not as an HTTP error.
    """
    try:
        await service.detector.start()
    except DetectorStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    service.client_clock = None
    return StatusResponse.from_status(service.detector.status)


@router.post("/stop", response_model=StatusResponse)
async def stop_detection(service: DetectionService = Depends(get_service)) -> StatusResponse:
    return StatusResponse.from_status(service.detector.stop())


@router.post("/reset", response_model=StatusResponse)
async def reset_count(service: DetectionService = Depends(get_service)) -> StatusResponse:
    return StatusResponse.from_status(service.detector.reset_count())
