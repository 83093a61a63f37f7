__title__ = "crudadmin"
__version__ = "1.0.0"
__author__ = "crudadmin contributors"
__license__ = "MIT"
__copyright__ = "2026 crudadmin contributors"
