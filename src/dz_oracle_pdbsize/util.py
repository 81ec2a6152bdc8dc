import os,sys,re;
import subprocess;
from string import Template;

GIGABYTE = 1024 * 1024 * 1024;

###############################################################################
def get_env_data(
    path    : str
   ,environ : dict = None
) -> dict:
   """
   Read a KEY=VALUE file into a dictionary.  Handles the shell flavor of such
   files: an optional leading export, single or double quotes around the
   value, trailing comments and $VAR or ${VAR} references to keys read
   earlier in the file or present in environ.
   """
   rez  = {};
   base = {} if environ is None else dict(environ);

   with open(path, 'r') as f:
      for line in f.readlines():
         line = line.replace('\n','').strip();

         if line == '' or line.startswith('#') or '=' not in line:
            continue;

         if line.startswith('export '):
            line = line[len('export '):].strip();

         a,b = line.split('=',1);
         a = a.strip();
         if not re.match(r'^[A-Za-z_][A-Za-z0-9_]*$',a):
            continue;

         b = b.strip();
         if len(b) > 1 and b[0] == b[-1] and b[0] in ('"',"'"):
            b = b[1:-1];
         else:
            b = re.sub(r'\s+#.*$','',b);

         scope = dict(base);
         scope.update(rez);
         rez[a] = Template(b).safe_substitute(scope);

   return rez;

###############################################################################
def dzq(
    pin    : str
) -> str:

   if pin is None or pin == "":
      return None;

   pin1 = pin.strip();

   if pin1.startswith("\""):
      pin2 = pin1.replace("\"","");

      if pin2 == pin2.upper():
         return pin2;
      else:
         return pin1;

   if pin1 == pin1.upper():
      return pin1;

   return "\"" + pin1 + "\"";

###############################################################################
def bytes2gb(
    pin    : float
) -> float:

   if pin is None:
      return 0.0;

   return float(pin) / GIGABYTE;

###############################################################################
def run_command(
    args
   ,env     : dict = None
   ,input   : str  = None
   ,tracing = None
) -> tuple:
   """
   Run an external command to completion.  Returns (returncode,stdout,stderr).
   A command that cannot be started at all is reported with returncode 127
   in the way a shell would.
   """
   if tracing is not None:
      tracing.write(2,None,None,'running ' + ' '.join(args));

   try:
      proc = subprocess.Popen(
          args
         ,stdin  = subprocess.PIPE if input is not None else subprocess.DEVNULL
         ,stdout = subprocess.PIPE
         ,stderr = subprocess.PIPE
         ,env    = env
         ,universal_newlines = True
      );

   except OSError as e:
      return (127,'',str(e));

   out,err = proc.communicate(input);

   return (proc.returncode,out or '',err or '');
