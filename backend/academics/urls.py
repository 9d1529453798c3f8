from rest_framework.routers import DefaultRouter
from .views import YearGroupViewSet, DepartmentViewSet, StudentViewSet, ClassViewSet, ClassScheduleViewSet, WorkRecordViewSet

router = DefaultRouter()
router.register('year-groups', YearGroupViewSet)
router.register('departments', DepartmentViewSet)
router.register('students', StudentViewSet)
router.register('classes', ClassViewSet)
router.register('schedules', ClassScheduleViewSet)
router.register('work-records', WorkRecordViewSet)

urlpatterns = router.urls
