# smartspend/urls.py
# ✅ Root URLconf: auth/profile screens + finance pages.

from django.urls import include, path

urlpatterns = [
    path("", include("accounts.urls")),   # 🔑 /auth/, /profile/, …
    path("", include("finance.urls")),    # 📊 dashboard + CRUD pages
]

handler404 = "smartspend.views.page_not_found_view"
