import os,sys,re;

# sqlplus messages that mean the statement did not run
ERROR_LINE = re.compile(r'^\s*(ORA|SP2|PLS|TNS)-\d+');

###############################################################################
def error_lines(
    text   : str
) -> list:

   if text is None:
      return [];

   return [line.strip() for line in text.splitlines() if ERROR_LINE.match(line)];

###############################################################################
def parse_rows(
    text   : str
   ,columns: int = 1
) -> list:
   """
   Turn headerless sqlplus output into tuples.  Blank lines are dropped and
   each line is split on whitespace into at most columns fields so the last
   field keeps any embedded blanks (READ WRITE).
   """
   if columns < 1:
      raise ValueError('columns must be at least 1');

   rez = [];
   if text is None:
      return rez;

   for line in text.splitlines():
      if line.strip() == '':
         continue;

      ary = line.split(None,columns - 1);
      ary = [item.strip() for item in ary];
      while len(ary) < columns:
         ary.append('');

      rez.append(tuple(ary));

   return rez;

###############################################################################
def parse_number(
    pin
) -> float:

   if pin is None:
      return None;

   if isinstance(pin,(int,float)):
      return float(pin);

   pin1 = str(pin).strip();
   if pin1 == '':
      return None;

   return float(pin1);
