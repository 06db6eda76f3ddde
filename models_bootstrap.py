# models_bootstrap.py
from employee import models as _employee_models
from project import models as _project_models
from allocation import models as _allocation_models
from absence import models as _absence_models
from teamevent import models as _teamevent_models
from deadline import models as _deadline_models
from editlock import models as _editlock_models
