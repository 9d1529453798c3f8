from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from .views import me, users, create_user, delete_user, bulk_import_teachers, classcard_import_teachers

urlpatterns = [
    path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', me, name='me'),
    path('users/', users, name='users'),
    path('users/create/', create_user, name='users-create'),
    path('users/<int:user_id>/', delete_user, name='users-delete'),
    path('users/bulk-import/', bulk_import_teachers, name='users-bulk-import'),
    path('users/classcard-import/', classcard_import_teachers, name='users-classcard-import'),
]
