# app/main.py

import logging
import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from posematch.analysis.pose_matcher import PoseDetector, PoseTester
from posematch.config import ENV_LOG_LEVEL, ENV_POSES_FILE, POSES_FILE, configure_logging
from posematch.data_models import (
    AlignmentDiagnostics, CaptureRequest, CaptureResponse, DetectResponse, PoseName,
    Settings, SettingsUpdate, SkeletonFrame,
)
from posematch.io.pose_store import append_pose, load_library, record_from_skeleton
from posematch.poses.library import PoseLibrary
from posematch.poses.pose_defs import builtin_library
from posematch.settings_cell import SettingsCell

logger = logging.getLogger("posematch.app")


# --- PATH CONFIG ---
def default_poses_path() -> str:
    return os.environ.get(ENV_POSES_FILE) or os.path.join(os.getcwd(), POSES_FILE)


def open_library(path: str) -> PoseLibrary:
    # a malformed file is fatal; a missing one falls back to the bundled poses
    if os.path.exists(path):
        return load_library(path)
    logger.warning("No pose library at %s, using built-in poses", path)
    return builtin_library()


# --- APP SETUP ---
def create_app(poses_path: Optional[str] = None, settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="posematch")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- STATE ---
    app.state.poses_path = poses_path or default_poses_path()
    app.state.library = open_library(app.state.poses_path)
    app.state.settings = SettingsCell(settings)
    app.state.last_diagnostics = None

    # --- ENDPOINTS ---
    @app.get("/health")
    async def health():
        return {"status": "ok", "poses": len(app.state.library)}

    @app.get("/poses", response_model=List[PoseName])
    async def list_poses():
        return list(app.state.library)

    @app.get("/settings", response_model=Settings)
    async def get_settings():
        return app.state.settings.snapshot()

    @app.put("/settings", response_model=Settings)
    async def put_settings(req: SettingsUpdate):
        try:
            updated = app.state.settings.update(**req.model_dump(exclude_none=True))
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        logger.info("Settings updated: joint_cutoff=%s rotation_cutoff=%s",
                    updated.joint_cutoff, updated.rotation_cutoff)
        return updated

    @app.post("/detect", response_model=DetectResponse)
    async def detect_pose(frame: SkeletonFrame):
        detector = PoseDetector(app.state.settings.snapshot(), app.state.library)
        return DetectResponse(pose=detector.detect(frame.joints))

    @app.post("/test/{pose}", response_model=AlignmentDiagnostics)
    async def test_pose(pose: str, frame: SkeletonFrame):
        name = PoseName.parse(pose)
        if name is None or name not in app.state.library:
            raise HTTPException(status_code=404, detail=f"Unknown pose {pose!r}")
        tester = PoseTester(name, app.state.settings.snapshot(), app.state.library)
        app.state.last_diagnostics = tester.inspect(frame.joints)
        return app.state.last_diagnostics

    @app.get("/diagnostics", response_model=AlignmentDiagnostics)
    async def last_diagnostics():
        if app.state.last_diagnostics is None:
            raise HTTPException(status_code=404, detail="No pose has been tested yet")
        return app.state.last_diagnostics

    @app.post("/poses/capture", response_model=CaptureResponse)
    async def capture_pose(req: CaptureRequest):
        if PoseName.parse(req.name) is None:
            raise HTTPException(status_code=422, detail=f"Unrecognized pose name {req.name!r}")
        try:
            record = record_from_skeleton(req.name, req.joints)
        except ValidationError as e:
            # nothing is written for a frame that could not be read back
            raise HTTPException(status_code=422, detail=str(e))
        append_pose(app.state.poses_path, record)
        app.state.library = load_library(app.state.poses_path)
        return CaptureResponse(
            status="success",
            message=f"Captured {req.name} ({len(record.data)} joints)",
            poses=list(app.state.library),
        )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    configure_logging(os.environ.get(ENV_LOG_LEVEL, "INFO"))
    uvicorn.run(app, host="127.0.0.1", port=8000)
