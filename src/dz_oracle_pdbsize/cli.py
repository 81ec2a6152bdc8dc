import os,sys,shlex;
import argparse;

from .util import get_env_data;
from .tracing import Tracing;
from .instance import DEFAULT_EXCLUDE;
from .discovery import ProcessDiscovery,ClusterDiscovery;
from .environment import EnvironmentResolver,DEFAULT_ORATAB;
from .client import SqlPlusClient,OracleDbClient,SQLPLUS_COMMAND,SQ_COMMAND;
from .report import ReportFormat;
from .engine import Engine;
from .result import DiscoveryEmptyError;

DEFAULTS = {
    'discovery'      : 'process'
   ,'client'         : 'sqlplus'
   ,'client_command' : None
   ,'env_dir'        : None
   ,'oratab'         : DEFAULT_ORATAB
   ,'exclude'        : list(DEFAULT_EXCLUDE)
   ,'check_open_mode': True
   ,'unit_suffix'    : None
   ,'header'         : False
   ,'down_text'      : 'pdb is down'
   ,'user'           : None
   ,'password'       : None
   ,'dsn'            : None
};

# config file key => option name
CONFIG_KEYS = {
    'DISCOVERY'       : 'discovery'
   ,'CLIENT'          : 'client'
   ,'CLIENT_COMMAND'  : 'client_command'
   ,'ENV_DIR'         : 'env_dir'
   ,'ORATAB'          : 'oratab'
   ,'EXCLUDE'         : 'exclude'
   ,'CHECK_OPEN_MODE' : 'check_open_mode'
   ,'UNIT_SUFFIX'     : 'unit_suffix'
   ,'HEADER'          : 'header'
   ,'DOWN_TEXT'       : 'down_text'
   ,'ORACLE_USER'     : 'user'
   ,'ORACLE_PASSWORD' : 'password'
   ,'ORACLE_DSN'      : 'dsn'
};

BOOLEAN_OPTIONS = ('check_open_mode','header');

###############################################################################
def str2bool(
    pin    : str
) -> bool:

   if isinstance(pin,bool):
      return pin;

   pin1 = str(pin).strip().lower();
   if pin1 in ('1','y','yes','true','on'):
      return True;
   if pin1 in ('0','n','no','false','off',''):
      return False;

   raise ValueError('not a boolean value: ' + str(pin));

###############################################################################
def read_config(
    path   : str
) -> dict:

   rez = {};
   for key,val in get_env_data(path,{}).items():
      key = key.upper();
      if key not in CONFIG_KEYS:
         continue;

      opt = CONFIG_KEYS[key];
      if opt == 'exclude':
         rez[opt] = [item.strip() for item in val.split(',') if item.strip() != ''];
      elif opt in BOOLEAN_OPTIONS:
         rez[opt] = str2bool(val);
      else:
         rez[opt] = val;

   return rez;

###############################################################################
def parse_arguments(
    argv
):

   parser = argparse.ArgumentParser(
       prog        = 'dz-oracle-pdbsize'
      ,description = 'Report the used size of every pluggable database of the running container databases on this host.'
   );
   parser.add_argument('--discovery',choices = ['process','cluster'],default = None
      ,help = 'find databases from pmon processes or from cluster resources');
   parser.add_argument('--client',choices = ['sqlplus','sq','oracledb'],default = None
      ,help = 'how queries are executed');
   parser.add_argument('--client-command',dest = 'client_command',default = None
      ,help = 'full sql client command line, e.g. "sqlplus -s / as sysdba"');
   parser.add_argument('--env-dir',dest = 'env_dir',action = 'append',default = None
      ,help = 'directory holding the per-database environment scripts');
   parser.add_argument('--oratab',default = None);
   parser.add_argument('--exclude',action = 'append',default = None
      ,help = 'skip instances whose pmon name contains this text');
   parser.add_argument('--no-open-mode-check',dest = 'check_open_mode',action = 'store_false',default = None
      ,help = 'query every pdb without looking at its open mode first');
   parser.add_argument('--unit-suffix',dest = 'unit_suffix',default = None
      ,help = 'text appended to every size, e.g. gb');
   parser.add_argument('--header',action = 'store_true',default = None);
   parser.add_argument('--down-text',dest = 'down_text',default = None);
   parser.add_argument('--user',default = None);
   parser.add_argument('--password',default = None);
   parser.add_argument('--dsn',default = None);
   parser.add_argument('--config',default = None
      ,help = 'KEY=VALUE configuration file');
   parser.add_argument('-v','--verbose',action = 'count',default = 0);
   parser.add_argument('-q','--quiet',action = 'store_true',default = False);

   return parser.parse_args(argv);

###############################################################################
def build_options(
    args
) -> dict:

   rez = dict(DEFAULTS);

   if args.config is not None:
      rez.update(read_config(args.config));

   for opt in DEFAULTS.keys():
      val = getattr(args,opt,None);
      if val is not None:
         rez[opt] = val;

   return rez;

###############################################################################
def build_client(
    options: dict
):

   if options['client'] == 'oracledb':
      return OracleDbClient(
          user     = options['user']
         ,password = options['password']
         ,dsn      = options['dsn']
      );

   if options['client_command'] is not None:
      command = shlex.split(options['client_command']);
   elif options['client'] == 'sq':
      command = list(SQ_COMMAND);
   else:
      command = list(SQLPLUS_COMMAND);

   return SqlPlusClient(command = command);

###############################################################################
def build_engine(
    options: dict
   ,tracing: Tracing
   ,out    = None
) -> Engine:

   if options['discovery'] == 'cluster':
      discovery = ClusterDiscovery(exclude = options['exclude']);
   elif options['discovery'] == 'process':
      discovery = ProcessDiscovery(exclude = options['exclude']);
   else:
      raise ValueError('unknown discovery strategy ' + str(options['discovery']));

   if options['env_dir'] is not None and isinstance(options['env_dir'],str):
      env_dirs = [options['env_dir']];
   else:
      env_dirs = options['env_dir'];

   resolver = EnvironmentResolver(
       env_dirs = env_dirs
      ,oratab   = options['oratab']
   );

   fmt = ReportFormat(
       unit_suffix = options['unit_suffix']
      ,header      = options['header']
      ,down_text   = options['down_text']
   );

   return Engine(
       discovery       = discovery
      ,resolver        = resolver
      ,client          = build_client(options)
      ,fmt             = fmt
      ,check_open_mode = options['check_open_mode']
      ,tracing         = tracing
      ,out             = out
   );

###############################################################################
def main(
    argv = None
) -> int:

   if argv is None:
      argv = sys.argv[1:];

   args = parse_arguments(argv);

   if args.quiet:
      level = 0;
   else:
      level = 1 + args.verbose;

   tracing = Tracing(stream = sys.stderr,level = level);

   try:
      options = build_options(args);
      engine  = build_engine(options,tracing);

   except (OSError,ValueError) as e:
      sys.stderr.write("ERROR, " + str(e) + "\n");
      return 2;

   try:
      return engine.run();

   except DiscoveryEmptyError:
      return 1;

if __name__ == '__main__':
   sys.exit(main());
