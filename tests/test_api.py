import unittest

from fastapi.testclient import TestClient
from pydantic import ValidationError
from pose_factory import pushup_pose

from api.app import create_app
from api.schemas import FrameRequest
from repcount.config import CalibrationConfig, DetectionConfig
from repcount.detector import NullSink
from repcount.repdetect import feedback
from repcount.vision.keypoints import pose_to_obj

CONFIG = DetectionConfig(
    calibration=CalibrationConfig(sample_delay=0.0),
    countdown_seconds=0,
    frame_interval=0.0,
)


def frame_payload(phase: str, shoulder_y: float = 100.0, timestamp=None) -> dict:
    payload = {"keypoints": pose_to_obj(pushup_pose(phase, shoulder_y=shoulder_y))}
    if timestamp is not None:
        payload["timestamp"] = timestamp
    return payload


class SessionApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(create_app(CONFIG))

    def test_initial_status(self) -> None:
        resp = self.client.get("/session/status")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(), {"count": 0, "running": False, "calibrated": False, "message": ""}
        )

    def test_status_route_reads_the_detector(self) -> None:
        service = self.client.app.state.detection
        self.assertIsInstance(service.detector.sink, NullSink)
        service.detector.reset_count()
        self.assertEqual(self.client.get("/session/status").json()["message"], feedback.COUNT_RESET)

    def test_start_without_frames_reports_calibration_failure(self) -> None:
        resp = self.client.post("/session/start")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertFalse(body["running"])
        self.assertEqual(body["message"], feedback.CALIBRATION_FAILED)

    def test_full_session_over_http(self) -> None:
        self.client.post("/session/frames", json=frame_payload("up"))
        resp = self.client.post("/session/start")
        self.assertTrue(resp.json()["running"])
        self.assertTrue(resp.json()["calibrated"])

        self.client.post("/session/frames", json=frame_payload("down", 140.0, timestamp=10.0))
        resp = self.client.post("/session/frames", json=frame_payload("up", 100.0, timestamp=10.4))
        self.assertEqual(resp.json()["count"], 1)
        self.assertEqual(resp.json()["message"], "Valid push-up! Total: 1")

        resp = self.client.post("/session/start")
        self.assertEqual(resp.status_code, 409)

        resp = self.client.post("/session/stop")
        self.assertEqual(
            resp.json(),
            {"count": 1, "running": False, "calibrated": False, "message": feedback.DETECTION_STOPPED},
        )

        resp = self.client.post("/session/reset")
        self.assertEqual(resp.json()["count"], 0)
        self.assertEqual(resp.json()["message"], feedback.COUNT_RESET)

    def test_empty_frame_is_accepted(self) -> None:
        resp = self.client.post("/session/frames", json={"keypoints": None})
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post("/session/frames", json={"keypoints": []})
        self.assertEqual(resp.status_code, 200)

    def test_incomplete_pose_is_rejected(self) -> None:
        resp = self.client.post(
            "/session/frames", json={"keypoints": [{"x": 1.0, "y": 1.0, "score": 0.9}]}
        )
        self.assertEqual(resp.status_code, 422)

    def test_out_of_range_score_is_rejected(self) -> None:
        payload = frame_payload("up")
        payload["keypoints"][0]["score"] = 1.5
        resp = self.client.post("/session/frames", json=payload)
        self.assertEqual(resp.status_code, 422)

    def test_running_session_rejects_clock_switch(self) -> None:
        self.client.post("/session/frames", json=frame_payload("up"))
        self.client.post("/session/start")

        resp = self.client.post("/session/frames", json=frame_payload("up", timestamp=5.0))
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post("/session/frames", json=frame_payload("down", 140.0))
        self.assertEqual(resp.status_code, 409)
        self.assertIn("timestamp", resp.json()["detail"])
        self.assertEqual(self.client.get("/session/status").json()["message"], feedback.RETURN_TO_TOP)

    def test_restarted_session_may_change_clock(self) -> None:
        self.client.post("/session/frames", json=frame_payload("up"))
        self.client.post("/session/start")
        self.client.post("/session/frames", json=frame_payload("up", timestamp=5.0))
        self.client.post("/session/stop")

        self.client.post("/session/start")
        resp = self.client.post("/session/frames", json=frame_payload("up"))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["running"])


class FrameRequestTests(unittest.TestCase):
    def test_infinite_coordinates_are_rejected(self) -> None:
        keypoints = pose_to_obj(pushup_pose("up"))
        keypoints[5]["x"] = float("inf")
        with self.assertRaises(ValidationError):
            FrameRequest.model_validate({"keypoints": keypoints})
        keypoints[5]["x"] = float("-inf")
        with self.assertRaises(ValidationError):
            FrameRequest.model_validate({"keypoints": keypoints})

    def test_infinite_timestamp_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            FrameRequest.model_validate({"keypoints": None, "timestamp": float("inf")})

    def test_finite_frame_builds_pose(self) -> None:
        frame = FrameRequest.model_validate({"keypoints": pose_to_obj(pushup_pose("up")), "timestamp": 1.5})
        self.assertEqual(frame.to_pose(), pushup_pose("up"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
