from django.urls import path
from .views import (
    AssetAnalysisAPIView,
    CategorySuggestionAPIView,
    ReportGeneratorAPIView,
    SavedReportAPIView,
    SavedReportDetailAPIView,
)

urlpatterns = [
    path('asset-analysis/', AssetAnalysisAPIView.as_view(), name='ai-asset-analysis'),
    path('category-suggestion/', CategorySuggestionAPIView.as_view(), name='ai-category-suggestion'),
    path('report-generator/', ReportGeneratorAPIView.as_view(), name='ai-report-generator'),
    path('saved-reports/', SavedReportAPIView.as_view(), name='saved-report-list-create'),
    path('saved-reports/<uuid:pk>/', SavedReportDetailAPIView.as_view(), name='saved-report-detail'),
]
