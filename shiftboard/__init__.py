"""ShiftBoard 서버 패키지 — 루틴 알림 피드 및 읽음 추적.

ShiftBoard server package — Routine notification feed and read tracking.
"""
