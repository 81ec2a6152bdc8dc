import os,sys,re;

from .util import run_command as util_run_command;
from .instance import DatabaseInstance,is_pmon_token,is_excluded,canonicalize,DEFAULT_EXCLUDE;
from .result import StepResult,DISCOVERY_EMPTY;

PS_COMMAND     = ['ps','-eo','args='];
CRSCTL_COMMAND = ['crsctl','status','resource','-t'];

CRS_DB_RESOURCE = re.compile(r'^ora\.(.+)\.db$');

###############################################################################
def pmon_tokens(
    ps_output: str
) -> list:
   """
   Last token of every process line that names an instance monitor.
   """
   rez = [];

   for line in ps_output.splitlines():
      ary = line.split();
      if len(ary) == 0:
         continue;

      if is_pmon_token(ary[-1]):
         rez.append(ary[-1]);

   return rez;

###############################################################################
def crs_database_names(
    crs_output: str
) -> list:

   rez = [];

   for line in crs_output.splitlines():
      ary = line.split();
      if len(ary) == 0:
         continue;

      m = CRS_DB_RESOURCE.match(ary[0]);
      if m is not None and m.group(1) not in rez:
         rez.append(m.group(1));

   return sorted(rez);

###############################################################################
class Discovery(object):

   def __init__(
       self
      ,exclude     : tuple = DEFAULT_EXCLUDE
      ,run_command = None
      ,ps_command  : list  = None
   ):

      self._exclude     = tuple(exclude) if exclude is not None else ();
      self._run_command = run_command if run_command is not None else util_run_command;
      self._ps_command  = list(ps_command) if ps_command is not None else list(PS_COMMAND);

   @property
   def exclude(self):
      return self._exclude;

   ############################################################################
   def process_table(
       self
      ,tracing = None
   ):

      rc,out,err = self._run_command(self._ps_command,tracing = tracing);

      if rc != 0:
         return StepResult.failure(
             DISCOVERY_EMPTY
            ,'Unable to read the process table: ' + (err.strip() or 'exit code ' + str(rc))
         );

      return StepResult.success(out);

   ############################################################################
   def running_instances(
       self
      ,ps_output: str
   ) -> list:

      rez  = [];
      seen = set();

      for token in pmon_tokens(ps_output):
         if is_excluded(token,self._exclude):
            continue;

         item = DatabaseInstance(token);
         if item.canonical_name in seen:
            continue;

         seen.add(item.canonical_name);
         rez.append(item);

      return rez;

   ############################################################################
   def discover(
       self
      ,tracing = None
   ):
      raise NotImplementedError();

###############################################################################
class ProcessDiscovery(Discovery):

   ############################################################################
   def discover(
       self
      ,tracing = None
   ):

      ps = self.process_table(tracing);
      if not ps.ok:
         return ps;

      rez = sorted(
          self.running_instances(ps.value)
         ,key = lambda x: x.canonical_name
      );

      if len(rez) == 0:
         return StepResult.failure(DISCOVERY_EMPTY,'No databases found.');

      return StepResult.success(rez);

###############################################################################
class ClusterDiscovery(Discovery):

   def __init__(
       self
      ,exclude        : tuple = DEFAULT_EXCLUDE
      ,run_command    = None
      ,ps_command     : list  = None
      ,crsctl_command : list  = None
   ):

      super().__init__(
          exclude     = exclude
         ,run_command = run_command
         ,ps_command  = ps_command
      );
      self._crsctl_command = list(crsctl_command) if crsctl_command is not None else list(CRSCTL_COMMAND);

   ############################################################################
   def discover(
       self
      ,tracing = None
   ):

      rc,out,err = self._run_command(self._crsctl_command,tracing = tracing);

      if rc != 0:
         return StepResult.failure(
             DISCOVERY_EMPTY
            ,'Unable to query cluster resources: ' + (err.strip() or 'exit code ' + str(rc))
         );

      resources = crs_database_names(out);
      if len(resources) == 0:
         return StepResult.failure(DISCOVERY_EMPTY,'No databases found in the RAC cluster.');

      ps = self.process_table(tracing);
      if not ps.ok:
         return ps;

      running = self.running_instances(ps.value);

      rez  = [];
      seen = set();
      for db_name in resources:
         match = self.match_resource(db_name,running);

         if match is None:
            if tracing is not None:
               tracing.write(
                   1
                  ,db_name
                  ,None
                  ,'No running pmon process found (excluding ' + ', '.join(self._exclude) + '). Skipping.'
               );
            continue;

         if match.canonical_name in seen:
            continue;

         seen.add(match.canonical_name);
         rez.append(match);

      if len(rez) == 0:
         return StepResult.failure(DISCOVERY_EMPTY,'No databases found.');

      return StepResult.success(rez);

   ############################################################################
   def match_resource(
       self
      ,db_name: str
      ,running: list
   ):

      target = canonicalize(db_name);

      for item in running:
         if item.canonical_name == target:
            return item;

      for item in running:
         if target in item.raw_process_name.lower():
            return item;

      return None;
