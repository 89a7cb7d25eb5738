"""
lockon — theatrical "search and lock-on" map choreography.

Entry point: python -m lockon

Provides:
- Great-circle arc interpolation for flight-path overlays (geo)
- Randomised three-phase hop planning and sequential playback (choreo)
- Procedural radar-ping synthesis and gesture-gated audio (audio)
- Headless and OSC-mirrored camera surfaces (camera, osc)
- Pulsing lock marker (marker)
- IP geolocation provider chain and environment report (ingest)
"""
