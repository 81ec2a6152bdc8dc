import os,sys;

from .util import get_env_data;
from .instance import DatabaseInstance,PMON_PREFIX;
from .result import StepResult,RESOLUTION_FAILURE;

DEFAULT_ORATAB = '/etc/oratab';

###############################################################################
class ConnectionContext(object):
   """
   Everything needed to reach one database: the instance identifier, the
   Oracle home and the complete process environment for client commands.
   Instances are never modified after construction; every database in a
   pass gets its own.
   """

   def __init__(
       self
      ,db_name    : str
      ,oracle_sid : str
      ,oracle_home: str
      ,environ    : dict
      ,source     : str = None
   ):

      self._db_name     = db_name;
      self._oracle_sid  = oracle_sid;
      self._oracle_home = oracle_home;
      self._environ     = dict(environ);
      self._source      = source;

   @property
   def db_name(self):
      return self._db_name;

   @property
   def oracle_sid(self):
      return self._oracle_sid;

   @property
   def oracle_home(self):
      return self._oracle_home;

   @property
   def environ(self):
      return dict(self._environ);

   @property
   def path(self):
      return self._environ.get('PATH');

   @property
   def source(self):
      return self._source;

   def __repr__(self):
      return 'ConnectionContext(' + repr(self._db_name) + ', sid=' + repr(self._oracle_sid) + ', home=' + repr(self._oracle_home) + ')';

###############################################################################
def read_oratab(
    path   : str
) -> list:

   rez = [];

   with open(path, 'r') as f:
      for line in f.readlines():
         line = line.split('#',1)[0].strip();
         if line == '':
            continue;

         ary = line.split(':');
         if len(ary) < 2 or ary[0].strip() == '' or ary[1].strip() == '':
            continue;

         rez.append((ary[0].strip(),ary[1].strip()));

   return rez;

###############################################################################
class EnvironmentResolver(object):

   def __init__(
       self
      ,env_dirs    : list = None
      ,oratab      : str  = DEFAULT_ORATAB
      ,base_environ: dict = None
   ):

      self._base_environ = dict(os.environ) if base_environ is None else dict(base_environ);

      if env_dirs is None:
         env_dirs = [os.getcwd()];
         if self._base_environ.get('HOME') is not None:
            env_dirs.append(self._base_environ['HOME']);

      self._env_dirs = [d for d in env_dirs if d is not None];
      self._oratab   = oratab;
      self._cache    = {};

   @property
   def env_dirs(self):
      return list(self._env_dirs);

   @property
   def oratab(self):
      return self._oratab;

   ############################################################################
   def resolve(
       self
      ,instance
      ,tracing = None
   ):

      if not isinstance(instance,DatabaseInstance):
         instance = DatabaseInstance(str(instance));

      key = instance.canonical_name;
      if key not in self._cache:
         self._cache[key] = self.resolve_uncached(instance,tracing);

      return self._cache[key];

   ############################################################################
   def resolve_uncached(
       self
      ,instance
      ,tracing = None
   ):

      rez = self.from_env_file(instance,tracing);
      if rez is not None:
         return rez;

      rez = self.from_oratab(instance,tracing);
      if rez is not None:
         return rez;

      return StepResult.failure(
          RESOLUTION_FAILURE
         ,'Failed to source environment.'
      );

   ############################################################################
   def instance_sid(
       self
      ,instance
   ) -> str:

      raw = instance.raw_process_name;
      if raw.startswith(PMON_PREFIX):
         return raw[len(PMON_PREFIX):];

      return instance.canonical_name;

   ############################################################################
   def env_file_candidates(
       self
      ,instance
   ) -> list:

      names = [];
      for item in [instance.canonical_name,instance.raw_name]:
         if item not in names:
            names.append(item);

      rez = [];
      for d in self._env_dirs:
         for item in names:
            rez.append(os.path.join(d,item));
            rez.append(os.path.join(d,item + '.env'));

      return rez;

   ############################################################################
   def from_env_file(
       self
      ,instance
      ,tracing = None
   ):

      for path in self.env_file_candidates(instance):
         if not os.path.isfile(path):
            continue;

         try:
            data = get_env_data(path,self._base_environ);

         except (OSError,UnicodeDecodeError,ValueError) as e:
            if tracing is not None:
               tracing.write(2,instance.canonical_name,None,'unable to read ' + path + ': ' + str(e));
            continue;

         if data.get('ORACLE_SID') is None or data.get('ORACLE_HOME') is None:
            if tracing is not None:
               tracing.write(2,instance.canonical_name,None,path + ' does not set ORACLE_SID and ORACLE_HOME');
            continue;

         environ = dict(self._base_environ);
         environ.update(data);

         return StepResult.success(
            ConnectionContext(
                db_name     = instance.canonical_name
               ,oracle_sid  = data['ORACLE_SID']
               ,oracle_home = data['ORACLE_HOME']
               ,environ     = environ
               ,source      = path
            )
         );

      return None;

   ############################################################################
   def from_oratab(
       self
      ,instance
      ,tracing = None
   ):

      if self._oratab is None or not os.path.isfile(self._oratab):
         return None;

      try:
         entries = read_oratab(self._oratab);

      except (OSError,UnicodeDecodeError) as e:
         if tracing is not None:
            tracing.write(2,instance.canonical_name,None,'unable to read ' + self._oratab + ': ' + str(e));
         return None;

      name = instance.canonical_name;
      home = None;

      for sid,ohome in entries:
         if sid.lower() == name:
            home = ohome;
            break;

      if home is None:
         for sid,ohome in entries:
            if sid.lower() in (name + '1',name + '2',name + '_1',name + '_2'):
               home = ohome;
               break;

      if home is None:
         return None;

      sid = self.instance_sid(instance);

      environ = dict(self._base_environ);
      environ['ORACLE_SID']  = sid;
      environ['ORACLE_HOME'] = home;
      if self._base_environ.get('PATH'):
         environ['PATH'] = os.path.join(home,'bin') + os.pathsep + self._base_environ['PATH'];
      else:
         environ['PATH'] = os.path.join(home,'bin');

      return StepResult.success(
         ConnectionContext(
             db_name     = name
            ,oracle_sid  = sid
            ,oracle_home = home
            ,environ     = environ
            ,source      = self._oratab
         )
      );
