from .instance import DatabaseInstance;
from .environment import ConnectionContext,EnvironmentResolver;
from .discovery import ProcessDiscovery,ClusterDiscovery;
from .client import SqlPlusClient,OracleDbClient;
from .pdb import PluggableDatabase,PdbEnumerator;
from .report import SizeReport,SizeReporter,ReportFormat,compute_used_gb;
from .engine import Engine;

__version__ = '0.9';
