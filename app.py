import argparse
import json
import logging
import sys

import cv2

from angle_calculator import format_angle
from assessment import asymmetry_label, asymmetry_reference, flexibility_label, flexibility_reference
from capture_session import CAPTURE_LABELS, CAPTURE_ORDER, MeasurementSession
from diagnosis import DiagnosisReport
from pose_detection import HolisticDetector
from thresholds import ShoulderLevelThresholds

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Estimate neck lateral flexion from neutral, right-tilt and left-tilt photos."
    )
    parser.add_argument("neutral", help="Photo facing straight ahead")
    parser.add_argument("right", help="Photo with the head tilted to the right")
    parser.add_argument("left", help="Photo with the head tilted to the left")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument(
        "--shoulder-tolerance",
        type=float,
        default=ShoulderLevelThresholds().tolerance_degrees,
        help="Maximum shoulder tilt in degrees before a tilt photo is rejected",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log intermediate geometry")
    return parser.parse_args(argv)


def print_report(report: DiagnosisReport) -> None:
    print(f"Neutral angle:   {report.neutral_angle:+.1f}°")
    print(f"Right flexion:   {report.right_angle:.1f}° ({format_angle(report.right_angle)})  "
          f"{flexibility_label(report.right_flexibility)}")
    print(f"Left flexion:    {report.left_angle:.1f}° ({format_angle(report.left_angle)})  "
          f"{flexibility_label(report.left_flexibility)}")
    print(f"Difference:      {report.asymmetry_diff:.1f}°  {asymmetry_label(report.asymmetry)}")
    print()
    print("Recommendations:")
    for line in report.recommendations:
        print(f"  - {line}")
    print()
    print("Range of motion:  " + ", ".join(f"{label} {band}" for label, band in flexibility_reference()))
    print("Left/right diff:  " + ", ".join(f"{label} {band}" for label, band in asymmetry_reference()))
    print()
    print("This is a simple screening, not a medical diagnosis. See a clinician if you have pain or numbness.")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    paths = dict(zip(CAPTURE_ORDER, (args.neutral, args.right, args.left)))
    images = {}
    for image_type, path in paths.items():
        image = cv2.imread(path)
        if image is None:
            logger.error("Could not read %s: %s", CAPTURE_LABELS[image_type], path)
            return 2
        images[image_type] = image

    with HolisticDetector() as detector, MeasurementSession(
        detector, shoulder_thresholds=ShoulderLevelThresholds(args.shoulder_tolerance)
    ) as session:
        session.start()
        for image_type in CAPTURE_ORDER:
            logger.info("%s - %s", session.progress_text, session.instruction)
            if session.submit_image(images[image_type]) is None:
                logger.error("%s rejected: %s", CAPTURE_LABELS[image_type], session.last_error)
                return 1

    if args.json:
        print(json.dumps(session.report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_report(session.report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
