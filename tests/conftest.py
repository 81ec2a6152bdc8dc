import io;
import pytest;

from dz_oracle_pdbsize.tracing import Tracing;
from dz_oracle_pdbsize.environment import ConnectionContext;
from dz_oracle_pdbsize.result import StepResult,QUERY_FAILURE;

GIB = 1024 * 1024 * 1024;

###############################################################################
class FakeCommands(object):
   """Stands in for util.run_command, answering by program name."""

   def __init__(self,answers):
      self.answers = answers;
      self.calls   = [];

   def __call__(self,args,env = None,input = None,tracing = None):
      self.calls.append((list(args),env,input));
      return self.answers.get(args[0],(127,'','command not found: ' + args[0]));

###############################################################################
class FakeClient(object):
   """
   Sql client double.  pdbs maps a database name to the rows returned by
   the v$pdbs query (or a failure message string), sizes maps a pdb name
   to the four byte totals (or a failure message string).
   """

   def __init__(self,pdbs = None,sizes = None,available = True):
      self.pdbs      = pdbs or {};
      self.sizes     = sizes or {};
      self.available = available;
      self.queries   = [];

   @property
   def name(self):
      return 'sqlplus';

   def is_available(self,context):
      if isinstance(self.available,dict):
         return self.available.get(context.db_name,True);
      return self.available;

   def query(self,context,str_sql,columns = 1,container = None,tracing = None):
      self.queries.append((context.db_name,container,str_sql,columns));

      if container is None:
         rows = self.pdbs.get(context.db_name,[]);
         if isinstance(rows,str):
            return StepResult.failure(QUERY_FAILURE,rows);
         return StepResult.success([tuple(r[:columns]) for r in rows]);

      totals = self.sizes.get(container);
      if totals is None or isinstance(totals,str):
         return StepResult.failure(QUERY_FAILURE,totals or 'ORA-65011: Pluggable database does not exist.');
      return StepResult.success([tuple(totals)]);

   def size_queries(self):
      return [q for q in self.queries if q[1] is not None];

###############################################################################
class FakeResolver(object):

   def __init__(self,failing = ()):
      self.failing = failing;
      self.calls   = [];

   def resolve(self,instance,tracing = None):
      self.calls.append(instance.canonical_name);
      if instance.canonical_name in self.failing:
         return StepResult.failure('RESOLUTION_FAILURE','Failed to source environment.');
      return StepResult.success(make_context(instance.canonical_name));

###############################################################################
def make_context(name,home = '/u01/app/oracle/product/19.0.0/dbhome_1',path = None):
   return ConnectionContext(
       db_name     = name
      ,oracle_sid  = name
      ,oracle_home = home
      ,environ     = {'ORACLE_SID':name,'ORACLE_HOME':home,'PATH':path or home + '/bin:/usr/bin'}
   );

@pytest.fixture()
def tracing():
   return Tracing(stream = io.StringIO(),level = 2);

@pytest.fixture()
def out():
   return io.StringIO();
