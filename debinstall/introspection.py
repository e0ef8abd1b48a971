"""Introspection data of the D-Bus interfaces debinstall calls.

Proxies are bound from this data instead of introspecting the remote object,
so binding a proxy never waits on the service. Only the members debinstall
uses are declared.
"""

POLKIT_AUTHORITY = """
<node>
  <interface name="org.freedesktop.PolicyKit1.Authority">
    <method name="CheckAuthorization">
      <arg type="(sa{sv})" name="subject" direction="in"/>
      <arg type="s" name="action_id" direction="in"/>
      <arg type="a{ss}" name="details" direction="in"/>
      <arg type="u" name="flags" direction="in"/>
      <arg type="s" name="cancellation_id" direction="in"/>
      <arg type="(bba{ss})" name="result" direction="out"/>
    </method>
  </interface>
</node>
"""

APTDAEMON = """
<node>
  <interface name="org.debian.apt">
    <method name="InstallFile">
      <arg type="s" name="path" direction="in"/>
      <arg type="b" name="force" direction="in"/>
      <arg type="s" name="transaction" direction="out"/>
    </method>
  </interface>
</node>
"""

APTDAEMON_TRANSACTION = """
<node>
  <interface name="org.debian.apt.transaction">
    <method name="Run"/>
  </interface>
</node>
"""

PACKAGEKIT = """
<node>
  <interface name="org.freedesktop.PackageKit">
    <method name="CreateTransaction">
      <arg type="o" name="object_path" direction="out"/>
    </method>
  </interface>
</node>
"""

PACKAGEKIT_TRANSACTION = """
<node>
  <interface name="org.freedesktop.PackageKit.Transaction">
    <method name="GetDetailsLocal">
      <arg type="as" name="files" direction="in"/>
    </method>
    <signal name="Details">
      <arg type="a{sv}" name="data"/>
    </signal>
    <signal name="ErrorCode">
      <arg type="u" name="code"/>
      <arg type="s" name="details"/>
    </signal>
    <signal name="Finished">
      <arg type="u" name="exit"/>
      <arg type="u" name="runtime"/>
    </signal>
  </interface>
</node>
"""
