"""
Eventboard backend package.

A FastAPI application exposing users and events on top of Firestore and
Firebase Authentication, plus a small image upload proxy for imgbb.
"""
