# services/exam-service/src/apps/core/api/urls.py
"""
Exam Service API URLs

URL routing configuration for REST API endpoints.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ExamViewSet, TrainingRecordViewSet

router = DefaultRouter()
router.register(r'exams', ExamViewSet, basename='exam')
router.register(r'training-records', TrainingRecordViewSet, basename='training-record')

urlpatterns = [
    path('', include(router.urls)),
]

# API URL Patterns Summary:
#
# Exams:
#   GET         /api/v1/exams/
#   GET         /api/v1/exams/{id}/
#   POST        /api/v1/exams/generate/
#   POST        /api/v1/exams/{id}/regenerate/
#   POST        /api/v1/exams/{id}/publish/
#   PATCH       /api/v1/exams/{id}/settings/
#   POST        /api/v1/exams/{id}/enroll/
#
# Training Records:
#   POST        /api/v1/training-records/{id}/generate-exam/
