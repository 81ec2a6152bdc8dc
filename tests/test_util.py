import sys;
import pytest;

from dz_oracle_pdbsize.util import get_env_data,dzq,bytes2gb,run_command,GIGABYTE;

def test_get_env_data_shell_flavor(tmp_path):
   path = tmp_path / "sales";
   path.write_text(
      "#!/bin/bash\n"
      "# comment\n"
      "export ORACLE_SID=SALES1\n"
      "ORACLE_HOME=\"/u01/app/oracle/product/19.0.0/dbhome_1\"\n"
      "export PATH=${ORACLE_HOME}/bin:$PATH\n"
      "export TNS_ADMIN=$ORACLE_HOME/network/admin   # tns\n"
      "export NLS_LANG='AMERICAN_AMERICA.AL32UTF8'\n"
      "umask 022\n"
      "alias sq='sqlplus / as sysdba'\n"
      "ORAENV_ASK=NO\n"
   );

   rez = get_env_data(str(path),{'PATH':'/usr/bin'});

   assert rez['ORACLE_SID'] == 'SALES1';
   assert rez['ORACLE_HOME'] == '/u01/app/oracle/product/19.0.0/dbhome_1';
   assert rez['PATH'] == '/u01/app/oracle/product/19.0.0/dbhome_1/bin:/usr/bin';
   assert rez['TNS_ADMIN'] == '/u01/app/oracle/product/19.0.0/dbhome_1/network/admin';
   assert rez['NLS_LANG'] == 'AMERICAN_AMERICA.AL32UTF8';
   assert rez['ORAENV_ASK'] == 'NO';
   assert 'alias sq' not in rez;
   assert len(rez) == 6;

def test_get_env_data_unknown_reference_left_alone(tmp_path):
   path = tmp_path / "x.env";
   path.write_text("A=$UNSET_THING/x\n");

   assert get_env_data(str(path))['A'] == '$UNSET_THING/x';

def test_dzq():
   assert dzq("SALESPDB") == "SALESPDB";
   assert dzq("salespdb") == "\"salespdb\"";
   assert dzq("\"SALESPDB\"") == "SALESPDB";
   assert dzq("") is None;

def test_bytes2gb():
   assert bytes2gb(GIGABYTE * 3) == 3.0;
   assert bytes2gb(None) == 0.0;

def test_run_command_captures_output():
   rc,out,err = run_command([sys.executable,'-c','import sys; sys.stdout.write(sys.stdin.read().upper())'],input = 'abc');

   assert rc == 0;
   assert out == 'ABC';

def test_run_command_missing_binary():
   rc,out,err = run_command(['/nonexistent/dz-oracle-pdbsize-binary']);

   assert rc == 127;
   assert out == '';
